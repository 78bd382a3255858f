"""
jira-linkflow helpers: logging setup, retries, terminal colors

Copyright (c) 2025
All rights reserved.

Redistribution and use in source and binary forms, with or without
modification, are permitted provided that the following conditions are met:

1. Redistributions of source code must retain the above copyright notice, this
   list of conditions and the following disclaimer.

2. Redistributions in binary form must reproduce the above copyright notice,
   this list of conditions and the following disclaimer in the documentation
   and/or other materials provided with the distribution.

3. Neither the name of the copyright holder nor the names of its
   contributors may be used to endorse or promote products derived from
   this software without specific prior written permission.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE
DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE
FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL
DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR
SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY,
OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE
OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
"""

import logging
import random
import sys
import time
from enum import Enum
from functools import wraps
from typing import List

import requests

from .constants import Constants
from .errors import APIError, RateLimitError


class LogLevel(Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


def setup_logging(
    level: LogLevel = LogLevel.INFO, include_timestamp: bool = True
) -> logging.Logger:
    """Set up logging configuration."""
    logger = logging.getLogger(Constants.LOGGER_NAME)
    logger.setLevel(level.value)

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)

    if include_timestamp:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        formatter = logging.Formatter("%(levelname)s - %(message)s")

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def retry_with_backoff(
    max_retries: int = Constants.MAX_RETRIES,
    base_delay: float = Constants.BASE_RETRY_DELAY,
    max_delay: float = Constants.MAX_RETRY_DELAY,
    backoff_factor: float = Constants.BACKOFF_FACTOR,
):
    """Decorator for exponential backoff retry logic."""

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(Constants.LOGGER_NAME)

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except RateLimitError:
                    if attempt == max_retries:
                        logger.error(
                            f"Max retries ({max_retries}) exceeded for {func.__name__}"
                        )
                        raise

                    delay = min(base_delay * (backoff_factor**attempt), max_delay)
                    jitter = random.uniform(0.1, 0.3) * delay
                    total_delay = delay + jitter

                    logger.debug(
                        f"Rate limited, retrying {func.__name__} in {total_delay:.2f}s (attempt {attempt + 1}/{max_retries + 1})"
                    )
                    time.sleep(total_delay)
                except requests.RequestException as e:
                    if attempt == max_retries:
                        logger.error(
                            f"Max retries ({max_retries}) exceeded for {func.__name__}: {e}"
                        )
                        raise APIError(
                            f"Request failed after {max_retries} retries: {e}"
                        )

                    delay = min(base_delay * (backoff_factor**attempt), max_delay)
                    logger.debug(
                        f"Request failed, retrying {func.__name__} in {delay:.2f}s: {e}"
                    )
                    time.sleep(delay)

        return wrapper

    return decorator


def split_keys(text: str) -> List[str]:
    """Split a comma separated list of issue keys, dropping blanks."""
    return [part.strip() for part in text.split(",") if part.strip()]


class Colors:
    """ANSI color codes for terminal output."""

    GREEN = "\033[92m"  # Applied transitions
    RED = "\033[91m"  # Failures

    BOLD = "\033[1m"  # Issue keys
    DIM = "\033[2m"  # Details/metadata

    BLUE = "\033[94m"  # Links
    CYAN = "\033[96m"  # Issue summaries
    YELLOW = "\033[93m"  # Statuses

    RESET = "\033[0m"

    @staticmethod
    def disable_colors():
        """Disable colors for non-terminal output."""
        Colors.GREEN = Colors.RED = Colors.BOLD = Colors.DIM = ""
        Colors.BLUE = Colors.CYAN = Colors.YELLOW = Colors.RESET = ""
