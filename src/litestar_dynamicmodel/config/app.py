# SPDX-FileCopyrightText: 2025 Hidayat Trimarsanto <trimarsanto@gmail.com>
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

import os

from litestar.logging import LoggingConfig


# Define your config
logging_config = LoggingConfig(
    root={
        "level": os.getenv("DYNMODEL_LOG_LEVEL", "INFO").upper(),
        "handlers": ["queue_listener"],
    },
)

# Use the .configure() method to get a logger factory
logger = logging_config.configure()("litestar-dynamicmodel")

# EOF
