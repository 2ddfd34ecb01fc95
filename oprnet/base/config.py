# The MIT License (MIT)
# Copyright © 2023 Yuma Rao
# Copyright © 2023 Opentensor Foundation

# Permission is hereby granted, free of charge, to any person obtaining a copy of this software and associated
# documentation files (the “Software”), to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so, subject to the following conditions:

# The above copyright notice and this permission notice shall be included in all copies or substantial portions of
# the Software.

# THE SOFTWARE IS PROVIDED “AS IS”, WITHOUT WARRANTY OF ANY KIND, EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO
# THE WARRANTIES OF MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL
# THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION
# OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER
# DEALINGS IN THE SOFTWARE.

from __future__ import annotations

import argparse
import os
from typing import Any, Mapping

import bittensor as bt
from dotenv import load_dotenv
from pydantic import BaseModel, Field

ENV_PREFIX = "OPRNET_GRADER__"


class GraderConfig(BaseModel):
    """Runtime settings for the grader tools."""

    snapshot_ttl_seconds: float = Field(default=580, gt=0)
    randomize: float = Field(default=0.0, ge=0.0, le=1.0)
    log_level: str = Field(default="info", pattern=r"^(trace|debug|info|warning)$")


def add_args(parser: argparse.ArgumentParser) -> None:
    """
    Adds grader arguments to the parser.
    """

    parser.add_argument(
        "--grader.snapshot_ttl_seconds",
        type=float,
        help="How long a price snapshot is reused before refetching.",
        default=None,
    )

    parser.add_argument(
        "--grader.randomize",
        type=float,
        help="Debug only: perturb snapshot prices by up to this fraction.",
        default=None,
    )

    parser.add_argument(
        "--grader.log_level",
        type=str,
        choices=["trace", "debug", "info", "warning"],
        help="Logging verbosity.",
        default=None,
    )


def load_config(
    args: argparse.Namespace | None = None,
    environ: Mapping[str, str] | None = None,
) -> GraderConfig:
    """Build the config from defaults, then CLI args, then environment.

    Environment variables have the HIGHEST priority, e.g.
    OPRNET_GRADER__SNAPSHOT_TTL_SECONDS=300.
    """
    if environ is None:
        if os.environ.get("OPRNET_TEST_MODE") != "true":
            load_dotenv()
        environ = os.environ

    values: dict[str, Any] = {}
    for name in GraderConfig.model_fields:
        if args is not None:
            cli_value = getattr(args, f"grader.{name}", None)
            if cli_value is not None:
                values[name] = cli_value
        env_value = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if env_value:
            values[name] = env_value

    # Env values are strings; let pydantic coerce them
    return GraderConfig.model_validate(values)


def apply_logging(config: GraderConfig) -> None:
    if config.log_level == "trace":
        bt.logging.set_trace(True)
    elif config.log_level == "debug":
        bt.logging.set_debug(True)
    elif config.log_level == "warning":
        bt.logging.set_warning(True)
    else:
        bt.logging.set_info(True)


__all__ = ["ENV_PREFIX", "GraderConfig", "add_args", "apply_logging", "load_config"]
