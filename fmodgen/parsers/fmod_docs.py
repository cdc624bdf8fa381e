import os
import re
from typing import Iterable

from fmodgen import logging as fmodgen_logging
from fmodgen import utils
from fmodgen.models import ParameterModifier, modifier_key

logger = fmodgen_logging.get_logger(__name__)

DOC_PAGES = (
    "core-api-system.html",
    "core-api-soundgroup.html",
    "core-api-sound.html",
    "core-api-reverb3d.html",
    "core-api-geometry.html",
    "core-api-dspconnection.html",
    "core-api-dsp.html",
    "core-api-channelgroup.html",
    "core-api-channelcontrol.html",
    "core-api-channel.html",
    "core-api-common.html",
    "plugin-api-codec.html",
    "plugin-api-dsp.html",
    "plugin-api-output.html",
    "studio-api-bank.html",
    "studio-api-bus.html",
    "studio-api-commandreplay.html",
    "studio-api-common.html",
    "studio-api-eventdescription.html",
    "studio-api-eventinstance.html",
    "studio-api-system.html",
    "studio-api-vca.html",
)

_FUNCTION_PATTERN = re.compile(r'<span class="nf">(\w+)</span>')
_OPTIONAL_PATTERN = re.compile(r'<dt>(\w+) <span><a class="token" href="(.+)" title="Optional">Opt')
_OUTPUT_PATTERN = re.compile(r'<dt>(\w+) <span><a class="token" href="(.+)" title="Output">Out')


def parse_fragment(content: str) -> dict[str, ParameterModifier]:
    """Collect the Opt/Out parameter badges of one manual page.

    Badges are attributed to the most recent function signature seen above
    them, line by line.
    """
    modifiers = {}
    function = ""
    for line in content.splitlines():
        if match := _FUNCTION_PATTERN.search(line):
            function = match.group(1)
        elif match := _OPTIONAL_PATTERN.search(line):
            modifiers[modifier_key(function, match.group(1))] = ParameterModifier.OPTIONAL
        elif match := _OUTPUT_PATTERN.search(line):
            modifiers[modifier_key(function, match.group(1))] = ParameterModifier.OUTPUT
    return modifiers


def parse_parameter_modifiers(paths: Iterable[str | os.PathLike[str]]) -> dict[str, ParameterModifier]:
    modifiers = {}
    for path in paths:
        page = parse_fragment(utils.read_file(path))
        logger.debug("Scraped %d parameter modifiers from %s", len(page), path)
        modifiers.update(page)
    return modifiers
