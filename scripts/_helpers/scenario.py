import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from rentable_nfts import Environment, LedgerError, ManualClock, RentableNFTs, load_config

from .basetypes import ScenarioContext, Step

logger = logging.getLogger(__name__)


def _mint(ctx: ScenarioContext, args: dict):
    return ctx.ledger.mint(args.get("uri", ""), sender=ctx[args["sender"]])


def _set_user(ctx: ScenarioContext, args: dict):
    ctx.ledger.setUser(
        int(args["token_id"]), ctx[args["user"]], ctx.timestamp(args["expires"]), sender=ctx[args["sender"]]
    )


def _burn(ctx: ScenarioContext, args: dict):
    ctx.ledger.burn(int(args["token_id"]), sender=ctx[args["sender"]])


def _transfer_from(ctx: ScenarioContext, args: dict):
    ctx.ledger.transferFrom(ctx[args["from"]], ctx[args["to"]], int(args["token_id"]), sender=ctx[args["sender"]])


def _approve(ctx: ScenarioContext, args: dict):
    ctx.ledger.approve(ctx[args["to"]], int(args["token_id"]), sender=ctx[args["sender"]])


def _set_approval_for_all(ctx: ScenarioContext, args: dict):
    ctx.ledger.setApprovalForAll(ctx[args["operator"]], bool(args.get("approved", True)), sender=ctx[args["sender"]])


def _time_travel(ctx: ScenarioContext, args: dict):
    if "timestamp" in args:
        ctx.clock.time_travel(timestamp=int(args["timestamp"]))
    else:
        ctx.clock.time_travel(seconds=int(args["seconds"]))


OPERATIONS: dict[str, Callable[[ScenarioContext, dict], Any]] = {
    "mint": _mint,
    "setUser": _set_user,
    "burn": _burn,
    "transferFrom": _transfer_from,
    "approve": _approve,
    "setApprovalForAll": _set_approval_for_all,
    "time_travel": _time_travel,
}


@dataclass
class StepResult:
    step: Step
    events: list = field(default_factory=list)
    value: Any = None
    error: Exception | None = None

    @property
    def reverted(self) -> bool:
        return self.error is not None

    @property
    def reason(self) -> str | None:
        match self.error:
            case None:
                return None
            case LedgerError():
                return self.error.reason
            case KeyError():
                return f"malformed step: missing argument {self.error}"
            case _:
                return f"malformed step: {self.error}"


def load_scenario(path: Path | str) -> dict:
    with open(path, "r") as f:
        scenario = json.load(f)
    for step in scenario.get("steps", []):
        if step.get("op") not in OPERATIONS:
            raise ValueError(f"unknown operation in step {step}")
    return scenario


class ScenarioManager:
    def __init__(self, env: Environment, scenario: dict):
        self.env = env
        self.config = load_config(env)
        self.clock = ManualClock(scenario.get("start"))
        self.ledger = RentableNFTs(self.config, self.clock)
        self.context = ScenarioContext.create(self.ledger, self.clock, scenario.get("accounts", []))
        self.steps = [Step.from_dict(s) for s in scenario.get("steps", [])]

    def run_step(self, step: Step) -> StepResult:
        events = []
        unsubscribe = self.ledger.subscribe(events.append)
        try:
            value = OPERATIONS[step.op](self.context, step.args)
            return StepResult(step, events, value)
        except LedgerError as e:
            logger.info("step %s reverted: %s", step, e.reason)
            return StepResult(step, events, error=e)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("step %s is malformed: %r", step, e)
            return StepResult(step, events, error=e)
        finally:
            unsubscribe()

    def run(self, strict: bool = False) -> list[StepResult]:
        results = []
        for step in self.steps:
            result = self.run_step(step)
            results.append(result)
            if result.reverted and strict:
                break
        return results

    def token_states(self) -> list[dict]:
        ledger = self.ledger
        return [
            {
                "token_id": token_id,
                "owner": self.context.alias(ledger.ownerOf(token_id)),
                "uri": ledger.tokenURI(token_id),
                "user": self.context.alias(ledger.userOf(token_id)),
                "expires": ledger.userExpires(token_id),
            }
            for token_id in (ledger.tokenByIndex(i) for i in range(ledger.totalSupply()))
        ]
