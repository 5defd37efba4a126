"""Orchestrator — binds media, analysis and edit decisions into a session."""

import logging
from dataclasses import dataclass, field

from recut.export import ExportPlan, build_export_plan
from recut.interpreter import Interpreter, interpret_command
from recut.manifest import InterpreterConfig, Manifest, SessionConfig
from recut.models import CommandResult, EditDecision, VideoAnalysis
from recut.preview import (
    EditSavings,
    PreviewTimeline,
    build_preview_timeline,
    calculate_edit_savings,
)
from recut.store import EditDecisionStore

logger = logging.getLogger(__name__)


@dataclass
class EngineResult:
    preview: PreviewTimeline
    plan: ExportPlan
    savings: EditSavings
    edits_applied: int = 0
    command_results: list[CommandResult] = field(default_factory=list)


class EditSession:
    """One media file being edited.

    Derived views (preview, export plan) are recomputed on every call from the
    current decisions and duration; the session caches nothing.
    """

    def __init__(
        self,
        duration: float,
        analysis: VideoAnalysis | None = None,
        decisions: list[EditDecision] | None = None,
        interpreter: Interpreter | None = None,
        config: SessionConfig | None = None,
        interpreter_config: InterpreterConfig | None = None,
    ):
        self.config = config or SessionConfig()
        self.duration = duration
        self.analysis = analysis
        self.interpreter = interpreter
        self.interpreter_config = interpreter_config or InterpreterConfig()
        self.store = EditDecisionStore(decisions or (), max_history=self.config.max_history)
        self.command_history: list[str] = []
        self.last_command_result: CommandResult | None = None

    @property
    def decisions(self) -> tuple[EditDecision, ...]:
        return self.store.decisions

    def set_duration(self, duration: float) -> None:
        # Decisions are kept as-is; out-of-range parts are clipped when building.
        self.duration = duration

    def execute_command(self, command: str) -> CommandResult:
        """Interpret *command* and add the resulting edits as one undo step."""
        if self.analysis is None:
            result = CommandResult(
                success=False,
                command=command,
                interpretation="No video analysis available",
                error="Please analyze the video first before running commands.",
            )
            self.last_command_result = result
            return result

        result = interpret_command(
            command, self.analysis, self.interpreter, self.interpreter_config
        )
        if result.success and result.edits:
            self.store.add(result.edits)

        limit = self.config.command_history_limit
        self.command_history = [command, *self.command_history][:limit]
        self.last_command_result = result
        return result

    def clear_command_history(self) -> None:
        self.command_history = []
        self.last_command_result = None

    def preview(self) -> PreviewTimeline:
        return build_preview_timeline(self.duration, self.store.decisions)

    def export_plan(self) -> ExportPlan:
        return build_export_plan(self.preview())

    def savings(self) -> EditSavings:
        return calculate_edit_savings(self.preview())


def process(
    manifest: Manifest,
    commands: list[str] | None = None,
    interpreter: Interpreter | None = None,
) -> EngineResult:
    """Apply *commands* to the manifest's decisions and plan the export."""
    session = EditSession(
        duration=manifest.duration,
        analysis=manifest.analysis,
        decisions=manifest.decisions,
        interpreter=interpreter,
        config=manifest.session,
        interpreter_config=manifest.interpreter,
    )

    applied = 0
    results: list[CommandResult] = []
    for command in commands or []:
        before = len(session.store)
        result = session.execute_command(command)
        applied += len(session.store) - before
        results.append(result)
        if not result.success:
            logger.warning("Command %r failed: %s", command, result.error)

    preview = session.preview()
    logger.info(
        "Planned export: %d segments, %.2fs -> %.2fs",
        len(preview.segments), preview.original_duration, preview.preview_duration,
    )
    return EngineResult(
        preview=preview,
        plan=build_export_plan(preview),
        savings=calculate_edit_savings(preview),
        edits_applied=applied,
        command_results=results,
    )
