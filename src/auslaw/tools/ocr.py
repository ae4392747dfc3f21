"""OCR fallback backed by the `tesseract` executable."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Protocol

from auslaw.config import Settings
from auslaw.errors import OcrError, OcrTimeoutError
from auslaw.logging import get_logger

logger = get_logger(__name__)


class OcrEngine(Protocol):
    """OCR engine interface."""

    async def recognize(self, image: bytes) -> str:
        """Recognize text in one page image."""


@dataclass(frozen=True)
class TesseractOcr:
    """Run `tesseract stdin stdout` once per page image.

    The subprocess is killed if the page times out or the awaiting task is cancelled.
    """

    command: str = "tesseract"
    language: str = "eng"
    timeout_s: float = 120.0

    async def recognize(self, image: bytes) -> str:
        try:
            proc = await asyncio.create_subprocess_exec(
                self.command,
                "stdin",
                "stdout",
                "-l",
                self.language,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise OcrError(f"OCR binary not found: {self.command}") from e
        except OSError as e:
            raise OcrError(f"OCR binary could not be started: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(image), timeout=self.timeout_s)
        except asyncio.TimeoutError as e:
            await _kill(proc)
            raise OcrTimeoutError(f"OCR timed out after {self.timeout_s:g}s") from e
        except asyncio.CancelledError:
            await _kill(proc)
            raise

        if proc.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise OcrError(f"OCR failed with exit code {proc.returncode}: {detail[:300]}")
        return stdout.decode("utf-8", errors="replace")


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        proc.kill()
        await proc.wait()


async def recognize_pages(engine: OcrEngine, images: list[bytes]) -> str:
    """OCR page images sequentially and join their text in page order.

    Raises:
        OcrError: If any page fails or the whole document yields no text.
    """

    pages: list[str] = []
    for i, image in enumerate(images, start=1):
        text = (await engine.recognize(image)).strip()
        logger.debug("OCR page done", extra={"page": i, "chars": len(text)})
        pages.append(text)

    joined = "\n\n".join(p for p in pages if p)
    if not joined:
        raise OcrError("OCR produced no text")
    return joined


def get_ocr_engine(settings: Settings) -> TesseractOcr:
    """Factory to create the OCR engine from settings."""

    return TesseractOcr(
        command=settings.ocr_command,
        language=settings.ocr_language,
        timeout_s=settings.ocr_page_timeout_s,
    )
