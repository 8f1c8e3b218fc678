"""
Shell-like command helpers.

Stateless functions grouped by concern:
- files: cat, ls, mkdir, rm, find, write_file, append_file, basename, dirname, test
- text: echo, read_line, grep, cut, sed, awk, sort_lines, uniq, wc, tr, head, tail
- process: run_process, exec_command, xargs, expr
- environment: env, set_env, pwd, cd
- stages: adapters turning helpers and programs into pipeline stages
"""

from bashlike.commands.environment import cd, env, pwd, set_env
from bashlike.commands.files import (
    append_file,
    basename,
    cat,
    dirname,
    find,
    ls,
    mkdir,
    rm,
    write_file,
)
from bashlike.commands.process import ProcessResult, exec_command, expr, run_process, xargs
from bashlike.commands.stages import parse_stage, process_stage, text_stage
from bashlike.commands.text import (
    WordCount,
    awk,
    cut,
    echo,
    grep,
    head,
    read_line,
    sed,
    sort_lines,
    tail,
    tr,
    uniq,
    wc,
)

__all__ = [
    "cd",
    "env",
    "pwd",
    "set_env",
    "append_file",
    "basename",
    "cat",
    "dirname",
    "find",
    "ls",
    "mkdir",
    "rm",
    "write_file",
    "ProcessResult",
    "exec_command",
    "expr",
    "run_process",
    "xargs",
    "parse_stage",
    "process_stage",
    "text_stage",
    "WordCount",
    "awk",
    "cut",
    "echo",
    "grep",
    "head",
    "read_line",
    "sed",
    "sort_lines",
    "tail",
    "tr",
    "uniq",
    "wc",
]
