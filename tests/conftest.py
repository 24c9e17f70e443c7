import os
import stat
import sys
from pathlib import Path

import pytest

from cmdnest.aliases import AliasTable
from cmdnest.context import CommandContext
from cmdnest.dispatcher import Dispatcher
from cmdnest.process import ProcessRunner

SRC_DIR = Path(__file__).resolve().parent.parent / "src"
PROGRAM = "/usr/local/bin/proj"


# ----------------------------------------------------------------------
# General helpers
# ----------------------------------------------------------------------
def make_script(path: Path, body: str = "exit 0\n", executable: bool = True) -> Path:
    """Write a /bin/sh script, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n" + body)
    if executable:
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


# Records its argv and the framework's environment next to the project root.
RECORDING_BODY = """\
printf '%s\\n' "$@" > "$CMDNEST_ROOTDIR/args.txt"
printf '%s\\n' "$CMDNEST_CMD_NAME" > "$CMDNEST_ROOTDIR/cmd_name.txt"
pwd > "$CMDNEST_ROOTDIR/cwd.txt"
"""

# Implements the completion protocol: echoes the local word index and argv.
COMPLETING_BODY = """\
if [ "$1" = "--complete" ]; then
  shift
  echo "index-$1"
  shift
  for arg in "$@"; do echo "arg-$arg"; done
  echo "world"
  echo "wide"
  echo "diagnostic noise" >&2
  exit 0
fi
echo "hello $*"
"""


@pytest.fixture
def project(tmp_path):
    """A project root with a small command tree.

    scripts/
      build                     leaf
      deploy, deploy.d/         leaf with subcommands prod (self-completing) and staging
      deploy.d/prod.d/eu        third level
      hello                     self-completing leaf
      broken                    self-completing leaf whose --complete fails
      quiet                     self-completing leaf that prints nothing
      lib.d/install             namespace-only group
      notes.txt                 not executable, not a command
    """
    root = tmp_path / "proj"
    scripts = root / "scripts"
    make_script(scripts / "build", RECORDING_BODY)
    make_script(scripts / "deploy", RECORDING_BODY)
    make_script(scripts / "deploy.d" / "prod", COMPLETING_BODY)
    make_script(scripts / "deploy.d" / "prod.d" / "eu", RECORDING_BODY)
    make_script(scripts / "deploy.d" / "staging", RECORDING_BODY)
    make_script(scripts / "hello", COMPLETING_BODY)
    make_script(scripts / "broken", 'echo "not a candidate"\necho "boom" >&2\nexit 3\n')
    make_script(scripts / "quiet", 'echo "only stderr" >&2\nexit 0\n')
    make_script(scripts / "lib.d" / "install", RECORDING_BODY)
    make_script(scripts / "notes.txt", "exit 0\n", executable=False)

    (scripts / ".cmdnest.yaml").write_text(
        "commands:\n"
        "  hello:\n"
        "    summary: Greet someone\n"
        "    complete: true\n"
        "  broken:\n"
        "    complete: true\n"
        "  quiet:\n"
        "    complete: true\n"
        "  deploy:\n"
        "    summary: Deploy a build\n"
        "    help: |\n"
        "      Deploys the current build to an environment.\n"
    )
    (scripts / "deploy.d" / ".cmdnest.yaml").write_text(
        "commands:\n"
        "  prod:\n"
        "    summary: Deploy to production\n"
        "    complete: true\n"
        "  staging:\n"
    )

    (root / "src" / "pkg").mkdir(parents=True)
    (root / "src" / "main.py").write_text("print('hi')\n")
    (root / "README.md").write_text("readme\n")
    (root / ".hidden").mkdir()
    return root


@pytest.fixture
def context(project):
    return CommandContext(
        root_dir=project,
        scripts_dir=project / "scripts",
        program=PROGRAM,
    )


@pytest.fixture
def aliases():
    return AliasTable({"ls": ["ls"], "b": ["build", "--fast"], "loop": ["b"]})


@pytest.fixture
def dispatcher(context, aliases):
    return Dispatcher(context, aliases)


class RecordingRunner(ProcessRunner):
    """Records run() calls instead of spawning processes."""

    def __init__(self, status: int = 0):
        self.status = status
        self.calls = []

    def run(self, argv, cwd=None, env=None):
        self.calls.append({"argv": list(argv), "cwd": cwd, "env": env})
        return self.status


@pytest.fixture
def recording_runner():
    return RecordingRunner()


@pytest.fixture(scope="session")
def binary_path():
    """Command line that runs the cmdnest module in a fresh interpreter."""
    return [sys.executable, "-m", "cmdnest"]


@pytest.fixture
def subprocess_env(project):
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC_DIR), env.get("PYTHONPATH")]))
    env["PYTHONWARNINGS"] = "ignore"
    env["CMDNEST_ROOTDIR"] = str(project)
    env["CMDNEST_PROGRAM"] = "./proj"
    for key in ("CMDNEST_SCRIPTS_DIR", "CMDNEST_CMD_NAME", "CMDNEST_CONFIG", "CMDNEST_PLUGIN_DIRS"):
        env.pop(key, None)
    return env


def read_lines(path: Path):
    return path.read_text().splitlines()
