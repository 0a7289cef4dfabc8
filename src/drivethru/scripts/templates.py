"""
Install script templates.

Shell scripts served by ``/get/{name}``. A machine runs
``curl -s http://<url>/get/<name> | sh`` and the script downloads the
archive from ``/download``, unpacks it into the profile destination and
chain-installs any extra artifacts.
"""

import re
from typing import Any

from pydantic import BaseModel, Field

_PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


class ScriptTemplate(BaseModel):
    """Shell script template with {{var}} placeholders."""

    name: str = Field(description="Template identifier")
    body_template: str = Field(description="Script body with {{vars}}")
    required_vars: list[str] = Field(default_factory=list, description="Variables that must be provided")

    def render(self, variables: dict[str, Any]) -> str:
        """
        Render the template with provided variables.

        Raises:
            ValueError: If a required variable is missing
        """
        missing = [v for v in self.required_vars if v not in variables]
        if missing:
            raise ValueError(f"Missing required template variables: {missing}")

        def substitute(match: re.Match) -> str:
            key = match.group(1)
            if key not in variables:
                return match.group(0)
            return str(variables[key])

        # Single pass: placeholders inside substituted values stay literal
        return _PLACEHOLDER_RE.sub(substitute, self.body_template)


_INSTALL_BODY = """#!/bin/sh

FORMAT="tar.gz"
TEMPFOLDER="/tmp/drivethru-{{name}}-$$"
TARBALL="$TEMPFOLDER/tar/{{name}}.$FORMAT"
{{platform_detection}}URL="{{download_url}}"
DEST="{{destination}}"

sudo mkdir -p "$TEMPFOLDER/tar"
sudo mkdir -p "$TEMPFOLDER/expanded"
sudo chmod -R 777 "$TEMPFOLDER"

echo "Downloading $URL"

curl -o "$TARBALL" -L -f "$URL"
if [ $? -eq 0 ]
then
    echo "\\nCopying {{name}} into $DEST\\n"
    sudo mkdir -p "$DEST"
    tar -xzf "$TARBALL" -C "$TEMPFOLDER/expanded" && sudo cp -av "$TEMPFOLDER/expanded/{{name}}/"* "$DEST"
    if [ $? -eq 0 ]
    then
        sudo rm -rf "$TEMPFOLDER"
        echo "\\n{{name}} has been installed into $DEST\\n"
{{chain_install}}        echo "Done!"
        exit 0
    fi
else
    echo "Failed to install {{name}}.\\nPlease try downloading from {{github}} instead."
    sudo rm -rf "$TEMPFOLDER"
fi

exit 1
"""

INSTALL_SCRIPT = ScriptTemplate(
    name="install",
    body_template=_INSTALL_BODY,
    required_vars=[
        "name",
        "platform_detection",
        "download_url",
        "destination",
        "chain_install",
        "github",
    ],
)

ERROR_SCRIPT = ScriptTemplate(
    name="error",
    body_template="""#!/bin/sh

echo "There was an error building your script for the download of {{name}}, please contact the developer."
exit 1
""",
    required_vars=["name"],
)

PLATFORM_DETECTION = 'OS=$(uname)\nARCH=$(uname -m)\n'
