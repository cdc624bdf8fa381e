import os
import shutil
from typing import override

from fmodgen import utils

from .thirdparty import ThirdParty


class RustFmt(ThirdParty):
    def __init__(self, file_path: str | os.PathLike[str]):
        self.file_path = file_path

    @staticmethod
    @override
    def check_requirements() -> list[str]:
        if not shutil.which("rustfmt"):
            return ["rustfmt"]
        return []

    def format(self):
        if self.check_requirements():
            raise OSError("rustfmt is not installed")
        cmd = ["rustfmt", "--edition", "2021", self.file_path]
        result = utils.run_command(cmd, capture_output=False)
        if result.returncode != 0:
            raise OSError(f"Failed to format the file: {self.file_path}")
