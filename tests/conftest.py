"""
Pytest configuration and shared fixtures for the build analyzer test suite.

This module provides common fixtures, sample Maven logs, and configuration
helpers for all test modules.
"""

import shutil
import sys
import tempfile
from pathlib import Path
from typing import Callable, Dict, List, Sequence, Tuple

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "e2e: mark test as an end-to-end test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Sample Logs
# ============================================================================

# A three-module sequential build: demo-parent (pom), core (tests), webapp
# (60 main sources, no tests).
SAMPLE_MAVEN_LOG = """\
[INFO] Scanning for projects...
[INFO] ------------------------------------------------------------------------
[INFO] Reactor Build Order:
[INFO] 
[INFO] demo-parent                                                        [pom]
[INFO] core                                                               [jar]
[INFO] webapp                                                             [war]
[INFO] 
[INFO] ----------------------< com.example:demo-parent >-----------------------
[INFO] Building demo-parent 1.0-SNAPSHOT                                  [1/3]
[INFO]   from pom.xml
[INFO] --------------------------------[ pom ]---------------------------------
[INFO] 
[INFO] --- clean:3.2.0:clean (default-clean) @ demo-parent ---
[INFO] 
[INFO] --- install:3.1.1:install (default-install) @ demo-parent ---
[INFO] Installing /work/demo/pom.xml to /home/dev/.m2/repository/com/example/demo-parent/1.0-SNAPSHOT/demo-parent-1.0-SNAPSHOT.pom
[INFO] 
[INFO] --------------------------< com.example:core >--------------------------
[INFO] Building core 1.0-SNAPSHOT                                         [2/3]
[INFO]   from core/pom.xml
[INFO] --------------------------------[ jar ]---------------------------------
[INFO] 
[INFO] --- clean:3.2.0:clean (default-clean) @ core ---
[INFO] 
[INFO] --- compiler:3.13.0:compile (default-compile) @ core ---
[INFO] Recompiling the module because of changed source code.
[INFO] Compiling 12 source files with javac [debug target 17] to target/classes
[INFO] 
[INFO] --- compiler:3.13.0:testCompile (default-testCompile) @ core ---
[INFO] Recompiling the module because of changed dependency.
[INFO] Compiling 3 source files with javac [debug target 17] to target/test-classes
[INFO] 
[INFO] --- surefire:3.2.5:test (default-test) @ core ---
[INFO] Using auto detected provider org.apache.maven.surefire.junitplatform.JUnitPlatformProvider
[INFO] 
[INFO] -------------------------------------------------------
[INFO]  T E S T S
[INFO] -------------------------------------------------------
[INFO] Running com.example.core.CalculatorTest
[INFO] Tests run: 4, Failures: 0, Errors: 0, Skipped: 0, Time elapsed: 0.064 s -- in com.example.core.CalculatorTest
[INFO] Running com.example.core.ParserTest
[INFO] Tests run: 2, Failures: 0, Errors: 0, Skipped: 1, Time elapsed: 0.136 s -- in com.example.core.ParserTest
[INFO] 
[INFO] Results:
[INFO] 
[INFO] Tests run: 6, Failures: 0, Errors: 0, Skipped: 1
[INFO] 
[INFO] --- jar:3.4.1:jar (default-jar) @ core ---
[INFO] Building jar: /work/demo/core/target/core-1.0-SNAPSHOT.jar
[INFO] 
[INFO] --- install:3.1.1:install (default-install) @ core ---
[INFO] Installing /work/demo/core/pom.xml to /home/dev/.m2/repository/com/example/core/1.0-SNAPSHOT/core-1.0-SNAPSHOT.pom
[INFO] Installing /work/demo/core/target/core-1.0-SNAPSHOT.jar to /home/dev/.m2/repository/com/example/core/1.0-SNAPSHOT/core-1.0-SNAPSHOT.jar
[INFO] 
[INFO] -------------------------< com.example:webapp >-------------------------
[INFO] Building webapp 1.0-SNAPSHOT                                       [3/3]
[INFO]   from webapp/pom.xml
[INFO] --------------------------------[ war ]---------------------------------
[INFO] 
[INFO] --- clean:3.2.0:clean (default-clean) @ webapp ---
[INFO] 
[INFO] --- compiler:3.13.0:compile (default-compile) @ webapp ---
[INFO] Recompiling the module because of changed source code.
[INFO] Compiling 60 source files with javac [debug target 17] to target/classes
[INFO] 
[INFO] --- war:3.4.0:war (default-war) @ webapp ---
[INFO] Packaging webapp
[INFO] Assembling webapp [webapp] in [/work/demo/webapp/target/webapp-1.0-SNAPSHOT]
[INFO] Building war: /work/demo/webapp/target/webapp-1.0-SNAPSHOT.war
[INFO] 
[INFO] --- install:3.1.1:install (default-install) @ webapp ---
[INFO] Installing /work/demo/webapp/pom.xml to /home/dev/.m2/repository/com/example/webapp/1.0-SNAPSHOT/webapp-1.0-SNAPSHOT.pom
[INFO] ------------------------------------------------------------------------
[INFO] Reactor Summary for demo-parent 1.0-SNAPSHOT:
[INFO] 
[INFO] demo-parent ........................................ SUCCESS [  0.215 s]
[INFO] core ............................................... SUCCESS [  4.637 s]
[INFO] webapp ............................................. SUCCESS [  2.100 s]
[INFO] ------------------------------------------------------------------------
[INFO] BUILD SUCCESS
[INFO] ------------------------------------------------------------------------
[INFO] Total time:  7.512 s
[INFO] Finished at: 2024-05-01T10:00:00+02:00
[INFO] ------------------------------------------------------------------------
"""

PARALLEL_BUILD_MARKER_LINE = (
    "[INFO] Using the MultiThreadedBuilder implementation with a thread count of 4"
)


def build_maven_log(
    modules: Sequence[Tuple[str, float]],
    total: str = "10.0 s",
    extra_lines: Sequence[str] = (),
) -> List[str]:
    """Build a minimal Maven log with one Reactor Summary row per module."""
    count = len(modules)
    lines = ["[INFO] Scanning for projects..."]
    lines.extend(extra_lines)
    for index, (name, _seconds) in enumerate(modules, start=1):
        lines.append(f"[INFO] Building {name} 1.0-SNAPSHOT                     [{index}/{count}]")
    lines.append("[INFO] ------------------------------------------------------------------------")
    lines.append("[INFO] Reactor Summary for demo 1.0-SNAPSHOT:")
    lines.append("[INFO] ")
    for name, seconds in modules:
        lines.append(f"[INFO] {name} ................................ SUCCESS [  {seconds:.3f} s]")
    lines.append("[INFO] ------------------------------------------------------------------------")
    lines.append("[INFO] BUILD SUCCESS")
    lines.append("[INFO] ------------------------------------------------------------------------")
    lines.append(f"[INFO] Total time:  {total}")
    lines.append("[INFO] ------------------------------------------------------------------------")
    return lines


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_log_lines() -> List[str]:
    """Lines of the sample three-module sequential build."""
    return SAMPLE_MAVEN_LOG.splitlines()


@pytest.fixture
def parallel_log_lines(sample_log_lines) -> List[str]:
    """The sample build as reported by a parallel (-T) Maven run."""
    return [sample_log_lines[0], PARALLEL_BUILD_MARKER_LINE] + sample_log_lines[1:]


@pytest.fixture
def sample_log_file(temp_dir) -> Path:
    """The sample build written to ``build.log``."""
    log_file = temp_dir / "build.log"
    log_file.write_text(SAMPLE_MAVEN_LOG, encoding="utf-8")
    return log_file


@pytest.fixture
def maven_log_factory() -> Callable[..., List[str]]:
    """Factory building minimal Maven logs from (module, seconds) pairs."""
    return build_maven_log


@pytest.fixture
def log_dir_factory(temp_dir) -> Callable[[Dict[str, Sequence[str]]], Path]:
    """Factory writing named logs into ``temp_dir/logs``."""

    def _create(logs: Dict[str, Sequence[str]]) -> Path:
        log_dir = temp_dir / "logs"
        log_dir.mkdir(exist_ok=True)
        for name, lines in logs.items():
            (log_dir / name).write_text("\n".join(lines) + "\n", encoding="utf-8")
        return log_dir

    return _create


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def sample_config_data():
    """Sample [analyzer] configuration for testing."""
    return {
        "parser": {
            "test_output_marker": "test-classes",
            "parallel_build_marker": "MultiThreadedBuilder",
        },
        "health": {
            "total_time_warn_seconds": 600.0,
            "total_time_info_seconds": 240.0,
            "hot_module_warn_share": 0.5,
            "hot_module_info_share": 0.3,
        },
        "output": {"json_indent": 4},
        "clean_install": {
            "log_subdir": "build-logs",
            "build_timeout_seconds": 1800,
        },
        "storage": {"format": "json", "compression": "snappy"},
    }


@pytest.fixture
def config_files(temp_dir, sample_config_data):
    """Create a temporary config.toml for testing."""
    import toml

    config_file = temp_dir / "config.toml"
    with open(config_file, "w") as f:
        toml.dump({"analyzer": sample_config_data}, f)

    return {
        "config": config_file,
        "dir": temp_dir,
    }


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically reset the configuration singleton after each test."""
    yield

    from buildanalyzer.config import reset_config_path

    reset_config_path()
