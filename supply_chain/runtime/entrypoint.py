from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from supply_chain.core.config.ledger_config import LedgerConfig
from supply_chain.core.domain.commands import dispatch, parse_script
from supply_chain.core.domain.errors import SupplyChainError
from supply_chain.core.escrow.bank import InMemoryBank
from supply_chain.runtime.bootstrap import build_ledger
from supply_chain.runtime.prometheus_metrics import PrometheusEventSink, PrometheusMetricsClient

if TYPE_CHECKING:
    from supply_chain.core.domain.ledger import OrderLedger

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STOPPED = 1
EXIT_BAD_INPUT = 2


@dataclass(slots=True)
class RejectedCommand:
    index: int
    op: str
    error: dict[str, Any]


@dataclass(slots=True)
class ReplayResult:
    applied: int = 0
    rejected: list[RejectedCommand] = field(default_factory=list)
    stopped: bool = False


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(path)
    return json.loads(path.read_text(encoding="utf-8"))


def replay(ledger: OrderLedger, commands: list[Any], *, stop_on_error: bool = False) -> ReplayResult:
    """Apply commands in order, collecting rejections instead of raising."""
    result = ReplayResult()

    for index, command in enumerate(commands):
        try:
            dispatch(ledger, command)
        except SupplyChainError as exc:
            LOGGER.warning(
                "Command rejected",
                extra={"index": index, "op": command.op, "reason": exc.reason},
            )
            result.rejected.append(
                RejectedCommand(index=index, op=command.op, error=exc.to_dict())
            )
            if stop_on_error:
                result.stopped = True
                break
            continue

        result.applied += 1

    return result


def build_summary(ledger: OrderLedger, result: ReplayResult) -> dict[str, Any]:
    summary: dict[str, Any] = {
        "applied": result.applied,
        "rejected": [
            {"index": r.index, "op": r.op, **r.error} for r in result.rejected
        ],
        "stopped": result.stopped,
        "events": len(ledger.notifier.history()),
    }
    summary.update(ledger.snapshot())

    transport = ledger.escrow.transport
    if isinstance(transport, InMemoryBank):
        summary["balances"] = transport.snapshot()

    return summary


def _push_metrics(metrics: PrometheusMetricsClient, summary: dict[str, Any], *, job: str) -> None:
    if not metrics.is_enabled():
        return

    try:
        metrics.set_gauge(name="supply_chain_escrow_total", value=float(summary["escrow_total"]))
        metrics.set_gauge(name="supply_chain_rejected_commands", value=float(len(summary["rejected"])))
        metrics.push_all(job=job)
    except Exception:  # pylint: disable=broad-exception-caught
        LOGGER.exception("Prometheus push failed")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Replay a script of ledger commands against a fresh ledger."
    )

    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to ledger config JSON (deployer, balances, role policy).",
    )

    parser.add_argument(
        "--script",
        type=Path,
        required=True,
        help="Path to JSON list of commands.",
    )

    parser.add_argument(
        "--events-out",
        type=Path,
        default=None,
        help="Append emitted events as JSON lines (overrides event_log_path).",
    )

    parser.add_argument(
        "--stop-on-error",
        action="store_true",
        help="Stop at the first rejected command.",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # ------------------------------------------------------------------
    # Load inputs
    # ------------------------------------------------------------------

    try:
        config = LedgerConfig.from_json_obj(_load_json(args.config))
        commands = parse_script(_load_json(args.script))
    except (FileNotFoundError, json.JSONDecodeError, PydanticValidationError) as exc:
        print(f"Error: invalid input: {exc}", file=sys.stderr)
        return EXIT_BAD_INPUT

    if args.events_out is not None:
        config = config.model_copy(update={"event_log_path": str(args.events_out)})

    # ------------------------------------------------------------------
    # Replay
    # ------------------------------------------------------------------

    metrics = PrometheusMetricsClient()
    ledger = build_ledger(
        config,
        extra_sinks=[PrometheusEventSink(registry=metrics.registry)],
    )

    try:
        result = replay(ledger, commands, stop_on_error=args.stop_on_error)
    finally:
        ledger.notifier.close()

    summary = build_summary(ledger, result)
    print(json.dumps(summary, indent=2, sort_keys=True))

    _push_metrics(metrics, summary, job=config.metrics_job)

    return EXIT_STOPPED if result.stopped else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
