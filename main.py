import sys
from tqdm import tqdm
from src.ConfigManager import ConfigManager
from src.ConversionEngine import ConversionEngine, DirectoryOpenError
from src.logging_utils import get_logger

logger = get_logger(__name__)


class VttToLrcApp:
    """
    Converts every VTT file in the work directory into an LRC file.
    """

    def __init__(self, config: ConfigManager = None, engine: ConversionEngine = None):
        self.config = config or ConfigManager()
        self.engine = engine or ConversionEngine(self.config)

    def run(self) -> int:
        """Single batch pass. Returns the process exit status."""
        logger.info("=== VTT to LRC Batch Converter ===")
        logger.info(
            "Removes audio extensions from names, skips cue number lines, "
            "deletes trailing numbers"
        )
        logger.info(f"Work directory: {self.config.work_dir.resolve()}")

        try:
            vtt_files = self.engine.find_vtt_files()
        except DirectoryOpenError as e:
            logger.error(f"{e} ({e.__cause__})")
            return 1

        if not vtt_files:
            logger.warning("No .vtt files found in the work directory.")

        success_count = 0
        fail_count = 0

        for vtt_path in tqdm(
            vtt_files,
            desc="Converting VTT files",
            unit="file",
            disable=not self.config.show_progress or not vtt_files,
        ):
            if self.engine.convert_file(vtt_path):
                success_count += 1
            else:
                fail_count += 1

        logger.info(
            f"Conversion complete! {success_count} file(s) converted, "
            f"{fail_count} failed."
        )
        return 0


def main() -> int:
    try:
        return VttToLrcApp().run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user. Exiting...")
        return 0
    except Exception as e:
        logger.error(f"A fatal error occurred: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
