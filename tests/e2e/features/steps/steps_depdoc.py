from behave import given, when, then
import json
import os
import subprocess
import sys
import tempfile
from pathlib import Path

def find_project_root(start: Path) -> Path:
    cur = start
    for _ in range(10):
        if (cur / "pyproject.toml").exists() or (cur / "src").exists():
            return cur
        cur = cur.parent
    # Fallback: go up 4 levels which should normally be project root
    return start.parents[4]

PROJECT_ROOT = find_project_root(Path(__file__).resolve())
SRC_ENTRY = PROJECT_ROOT / "src" / "depdoc.py"

def _resolve_placeholder(val, context):
    if val == "<tmp_dir>":
        return getattr(context, "tmp_dir")
    return val

@given("a temp directory with composer.lock:")
def step_temp_composer_lock(context):
    tmp_dir = Path(tempfile.mkdtemp(prefix="dd-composer-"))
    json.loads(context.text)  # fail early on a broken fixture
    (tmp_dir / "composer.json").write_text("{}", encoding="utf-8")
    (tmp_dir / "composer.lock").write_text(context.text, encoding="utf-8")
    context.tmp_dir = str(tmp_dir)

@given("the manifest:")
def step_manifest(context):
    path = Path(context.tmp_dir) / "DEPENDENCIES.md"
    path.write_text(context.text + "\n", encoding="utf-8")

@when("I run depdoc with arguments:")
def step_run_depdoc(context):
    args = []
    action_token = None

    for row in context.table:
        arg = row["arg"].strip()
        val = row["value"].strip()

        if arg.lower() in ("action", "<action>"):
            action_token = val
            continue

        # Interpret boolean flags passed as "true"
        if val.lower() == "true":
            args.append(arg)
        else:
            args.extend([arg, _resolve_placeholder(val, context)])

    cmd = [sys.executable, str(SRC_ENTRY)]
    if action_token:
        cmd.append(action_token)
    cmd.extend(args)

    env = os.environ.copy()
    env["PYTHONPATH"] = f"{PROJECT_ROOT / 'src'}:" + env.get("PYTHONPATH", "")

    context.proc = subprocess.run(
        cmd,
        cwd=str(PROJECT_ROOT),
        text=True,
        capture_output=True,
        env=env,
    )

@then("the process exits with code {code:d}")
def step_exit_code(context, code):
    assert context.proc.returncode == code, f"Expected {code}, got {context.proc.returncode}\nSTDOUT:\n{context.proc.stdout}\nSTDERR:\n{context.proc.stderr}"

@then('stdout is empty or whitespace only')
def step_stdout_quiet(context):
    assert context.proc.stdout.strip() == "", f"Expected empty stdout, got:\n{context.proc.stdout}"

@then('stdout contains "{text}"')
def step_stdout_contains(context, text):
    assert text in context.proc.stdout, f"Expected {text!r} in stdout:\n{context.proc.stdout}"

@then('stderr contains "{text}"')
def step_stderr_contains(context, text):
    assert text in context.proc.stderr, f"Expected {text!r} in stderr:\n{context.proc.stderr}"

@then("stdout lines are:")
def step_stdout_lines(context):
    expected = [row["line"].strip() for row in context.table]
    actual = context.proc.stdout.strip().splitlines()
    assert actual == expected, f"Expected lines {expected}, got {actual}"
