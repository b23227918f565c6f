import logging
import os
import sys
import warnings

import click

from rentable_nfts import Environment

from ._helpers.scenario import ScenarioManager, load_scenario

logger = logging.getLogger(__name__)
logger.setLevel(logging.WARNING)
warnings.filterwarnings("ignore")


@click.command()
@click.argument("scenario_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--env", "env_name", default=lambda: os.environ.get("ENV", "local"), help="config environment")
@click.option("--strict", is_flag=True, help="stop at the first reverted step")
def cli(scenario_file, env_name, strict):
    env = Environment[env_name]
    manager = ScenarioManager(env, load_scenario(scenario_file))
    ctx = manager.context

    print(f"Replaying {scenario_file} in {env.name} with {len(manager.steps)} steps")

    results = manager.run(strict)
    for result in results:
        if result.reverted:
            print(f"## {result.step} REVERTED: {result.reason}")
            continue
        print(f"## {result.step}" + (f" -> {result.value}" if result.value is not None else ""))
        for event in result.events:
            args = {k: ctx.alias(v) if isinstance(v, str) else v for k, v in event._asdict().items()}
            print(f"   {type(event).__name__} {args}")

    print(f"Final state at {manager.clock.now()}")
    for state in manager.token_states():
        print(f"   {state}")

    if strict and any(r.reverted for r in results):
        sys.exit(1)
    print("Done")


if __name__ == "__main__":
    cli()
