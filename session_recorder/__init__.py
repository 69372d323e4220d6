"""Session recorder for concurrent browser automation.

Records every tool invocation made against a browser instance into an
ordered session log, persists sessions as JSON, replays them against a
fresh instance and turns them into Playwright scripts and regression tests.
"""

__version__ = "1.0.0"
