"""Render a Markdown file with KaTeX math and inlined images.

Usage:
    docext README.md
    docext docs/guide.md --output build/guide.md --base-dir docs
"""

import sys
from pathlib import Path

import tyro
from loguru import logger

from docext.config import get_settings
from docext.exceptions import DocextError
from docext.logging_config import configure_logging
from docext.pipeline import render_file


def main(
    input: tyro.conf.Positional[Path],
    output: Path | None = None,
    base_dir: Path | None = None,
    max_image_size: int | None = None,
    verbose: bool = False,
) -> None:
    """Render a Markdown file with KaTeX math and inlined images.

    Args:
        input: Markdown file to transform.
        output: Where to write the result (stdout if omitted).
        base_dir: Directory image paths resolve against (defaults to the input's directory).
        max_image_size: Largest image to inline, in bytes (overrides DOCEXT_MAX_IMAGE_SIZE).
        verbose: Log each stage at debug level.
    """
    settings = get_settings()
    if max_image_size is not None:
        settings = settings.model_copy(update={"max_image_size": max_image_size})
    configure_logging("DEBUG" if verbose else settings.log_level)

    try:
        result = render_file(input, base_dir, settings)
    except OSError as e:
        logger.error(f"Cannot read {input}: {e}")
        sys.exit(1)
    except DocextError as e:
        logger.bind(**e.to_dict()).error(f"Failed to render {input}: {e}")
        sys.exit(1)

    if output is None:
        sys.stdout.write(result)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result, encoding="utf-8")
    logger.info(f"Wrote {output}")


def run() -> None:
    tyro.cli(main)


if __name__ == "__main__":
    run()
