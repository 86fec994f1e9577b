"""Pick a reconstruction strategy for one candidate span.

The JSON reconstructor runs first; the YAML reconstructor only sees spans
the JSON reconstructor could not make sense of.
"""

from __future__ import annotations

from ..models import RepairMode, RepairResult
from ..utils.debug_log import SILENT, DebugLog
from .json_reconstructor import JsonReconstructor
from .yaml_reconstructor import YamlReconstructor

ALL_FAILED = "All reconstruction attempts failed"


def repair(raw_span: str, debug: DebugLog = SILENT) -> RepairResult:
    """Repair ``raw_span`` into a JSON value.

    Returns a failed result (``score = inf``) carrying the warnings of both
    attempts when neither strategy succeeds; never raises for bad input.

    Example:
        >>> repair("{a:1 b:2}").object
        {'a': 1, 'b': 2}
    """
    log = debug.child("repair")

    json_attempt = JsonReconstructor(raw_span, debug.child("json")).reconstruct()
    if json_attempt.success:
        log.basic("JSON-ish repair succeeded with score %s", json_attempt.score)
        return json_attempt.to_repair_result(RepairMode.JSON_ISH)

    yaml_attempt = YamlReconstructor(raw_span, debug.child("yaml")).reconstruct()
    if yaml_attempt.success:
        log.basic("YAML-ish repair succeeded with score %s", yaml_attempt.score)
        return yaml_attempt.to_repair_result(RepairMode.YAML_ISH)

    log.basic("No reconstruction for span of %d characters", len(raw_span))
    warnings = [*json_attempt.warnings, *yaml_attempt.warnings, ALL_FAILED]
    return RepairResult.failed(warnings)
