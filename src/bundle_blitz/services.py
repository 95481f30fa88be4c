from dataclasses import dataclass

from bundle_blitz.ai.anthropic_client import AnthropicAiClient
from bundle_blitz.config import Settings
from bundle_blitz.core.ports.ai import AiClient
from bundle_blitz.core.ports.analyzer import StaticAnalyzer
from bundle_blitz.core.ports.stages import FormatStage, TransformStage
from bundle_blitz.core.ports.store import KeyValueStore
from bundle_blitz.core.session import BuildOptions
from bundle_blitz.lint.treesitter_analyzer import TreeSitterAnalyzer
from bundle_blitz.stages.subprocess_stages import EsbuildTransformStage, PrettierFormatStage
from bundle_blitz.store import JsonFileKeyValueStore


@dataclass
class Collaborators:
    """The external tools a build or insight request talks to."""

    transform: TransformStage | None
    formatter: FormatStage | None
    analyzer: StaticAnalyzer | None
    ai: AiClient
    store: KeyValueStore | None


def build_collaborators(settings: Settings) -> Collaborators:
    return Collaborators(
        transform=EsbuildTransformStage(settings.esbuild, timeout=settings.stage_timeout),
        formatter=PrettierFormatStage(settings.prettier, timeout=settings.stage_timeout),
        analyzer=TreeSitterAnalyzer(),
        ai=AnthropicAiClient(settings.anthropic_api_key, model=settings.model),
        store=JsonFileKeyValueStore(settings.state_dir),
    )


def default_options(settings: Settings) -> BuildOptions:
    return BuildOptions(enable_transpilation=settings.transpile, enable_formatting=settings.format)
