"""Shell script emission for parent shell integration."""

from __future__ import annotations

import os
import sys
from pathlib import Path

SCRIPT_WARNING = "# if you can read this, you didn't launch hop from its shell function. run hop --help."

SHELLS = ("bash", "zsh", "fish")


def q(s: str) -> str:
    """Shell-quote a string."""
    return "'" + s.replace("'", "'\"'\"'") + "'"


def emit_script(cmds: list[str]) -> None:
    """Format and print commands for shell eval."""
    print(SCRIPT_WARNING)
    print(" && \\\n  ".join(cmds))


def script_cd(path: str | Path) -> list[str]:
    """Generate commands to change into a directory."""
    return [f"cd {q(str(path))}"]


def detect_shell() -> str:
    """Guess the user's shell from $SHELL, defaulting to bash."""
    name = Path(os.environ.get("SHELL", "")).name
    return name if name in SHELLS else "bash"


def generate_init_script(shell: str | None = None, command: str | None = None) -> str:
    """Generate the shell function that evals `hop exec` output."""
    shell = shell or detect_shell()
    command = command or f"{q(sys.executable)} -m hop_py"

    if shell == "fish":
        return f"""function hop
  set -l out ({command} exec $argv | string collect)
  if test $status -eq 0
    eval $out
  end
end
complete -c hop -f -a '(__fish_complete_directories (commandline -ct))'
"""

    completion = (
        "compdef '_files -/' hop 2>/dev/null" if shell == "zsh" else "complete -o dirnames hop"
    )
    return f"""hop() {{
  local out
  out=$({command} exec "$@")
  if [ $? -eq 0 ]; then
    eval "$out"
  else
    return 1
  fi
}}
{completion}
"""
