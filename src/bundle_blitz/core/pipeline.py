import logging
from collections.abc import Sequence

from bundle_blitz.core.diagnostics import DiagnosticLog
from bundle_blitz.core.exceptions import StageError
from bundle_blitz.core.ports.stages import FormatStage, TransformStage

logger = logging.getLogger(__name__)


async def run_stages(
    text: str,
    stages: Sequence[TransformStage | FormatStage | None],
    log: DiagnosticLog,
) -> str:
    """Pass ``text`` through each enabled stage in order.

    ``None`` entries are disabled stages. A failing stage is logged as a
    warning and the text from before that stage carries on to the next one.
    """
    current = text
    for stage in stages:
        if stage is None:
            continue
        try:
            current = await stage.apply(current)
        except StageError as exc:
            logger.warning("Stage %s failed: %s", exc.stage, exc.message)
            log.append(f"{exc.stage} stage failed, keeping previous output: {exc.message}", "warning")
    return current


async def run_transform_pipeline(
    text: str,
    log: DiagnosticLog,
    transform: TransformStage | None = None,
    formatter: FormatStage | None = None,
) -> str:
    """Transform before format: formatting assumes already valid syntax."""
    return await run_stages(text, [transform, formatter], log)
