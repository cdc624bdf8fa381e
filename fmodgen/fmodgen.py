import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fmodgen import logging as fmodgen_logging
from fmodgen import patching, thirdparty, utils
from fmodgen.api import Api, ApiBuilder
from fmodgen.generators import ffi, lib
from fmodgen.parsers import DOC_PAGES, parse, parse_parameter_modifiers
from fmodgen.thirdparty import RustFmt

logger = fmodgen_logging.get_logger(__name__)


@dataclass(frozen=True)
class HeaderSource:
    path: str
    dialect: str
    link: Optional[str] = None


HEADERS = (
    HeaderSource("api/studio/inc/fmod_studio.h", "fmod_studio", "fmodstudio"),
    HeaderSource("api/studio/inc/fmod_studio_common.h", "fmod_studio_common"),
    HeaderSource("api/core/inc/fmod.h", "fmod", "fmod"),
    HeaderSource("api/core/inc/fmod_common.h", "fmod_common"),
    HeaderSource("api/core/inc/fmod_codec.h", "fmod_codec"),
    HeaderSource("api/core/inc/fmod_output.h", "fmod_output"),
    HeaderSource("api/core/inc/fmod_dsp.h", "fmod_dsp"),
    HeaderSource("api/core/inc/fmod_dsp_effects.h", "fmod_dsp_effects"),
    HeaderSource("api/core/inc/fmod_errors.h", "fmod_errors"),
)


def _format_in_place(path: str) -> None:
    try:
        RustFmt(path).format()
    except OSError as e:
        logger.warning("Keeping unformatted output: %s", e)


class FmodGen:
    """Reads an FMOD SDK and writes the `ffi.rs` and `lib.rs` bindings."""

    def __init__(self, sdk_root: str, output_dir: str, config_file: Optional[str] = None):
        self.sdk_root = Path(sdk_root)
        self.output_dir = Path(output_dir)
        self.config = utils.try_load_config(config_file)
        self.stage = "configuration"

        if not fmodgen_logging.is_configured():
            state = fmodgen_logging.configure_logging(self.config)
            if state.text_log_path:
                logger.info("Logging to %s", state.text_log_path)

        logger.info("SDK root: %s", self.sdk_root)
        logger.info("Output directory: %s", self.output_dir)

    def parse_headers(self, builder: ApiBuilder) -> None:
        for header in HEADERS:
            self.stage = f"parsing {header.path}"
            source = utils.read_file(self.sdk_root / header.path)
            builder.add_header(parse(header.dialect, source), link=header.link)

    def scrape_docs(self, builder: ApiBuilder) -> None:
        self.stage = "reading documentation"
        docs = self.sdk_root / self.config["docs"]["directory"]
        builder.add_modifiers(parse_parameter_modifiers(docs / page for page in DOC_PAGES))

    def build_api(self) -> Api:
        builder = ApiBuilder()
        self.parse_headers(builder)
        self.scrape_docs(builder)
        self.stage = "patching"
        patching.apply_all(builder)
        return builder.build()

    def report(self, api: Api) -> None:
        print("FMOD API")
        for label, count in api.census().items():
            print(f"{label.capitalize()}: {count}")

    def render(self, api: Api) -> dict[str, str]:
        general = self.config["general"]
        self.stage = "generating ffi"
        ffi_code = ffi.generate(api)
        self.stage = "generating lib"
        lib_code = lib.generate(api)
        return {
            os.fspath(self.output_dir / general["ffi_filename"]): ffi_code,
            os.fspath(self.output_dir / general["lib_filename"]): lib_code,
        }

    def run(self) -> Api:
        api = self.build_api()
        self.report(api)
        files = self.render(api)

        self.stage = "writing"
        formatter = None
        if self.config["general"]["rustfmt"]:
            missing_requirements = thirdparty.check_all_requirements()
            if missing_requirements:
                logger.warning("Missing requirements: %s; writing unformatted output", ", ".join(missing_requirements))
            else:
                formatter = _format_in_place
        utils.save_code_atomically(files, formatter=formatter)
        for path in files:
            logger.info("Wrote %s", path)
        return api
