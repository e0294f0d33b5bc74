"""Detect dangerous input sinks that lack a same-line mitigation.

Python, PHP and Java are covered by local line checks. JavaScript is
delegated to ESLint through :mod:`reposcan.linter`.
"""

from __future__ import annotations

import re
from typing import Tuple

from reposcan.concern import Concern
from reposcan.severity import Severity
from reposcan.utils.languages import JAVA, PHP, PYTHON

from .patterns import LineCheck

CONCERN = Concern.SANITIZATION

ONLY_PYTHON = frozenset({PYTHON})
ONLY_PHP = frozenset({PHP})
ONLY_JAVA = frozenset({JAVA})

PYTHON_RULES: Tuple[LineCheck, ...] = (
    LineCheck(
        name="python_dynamic_eval",
        concern=CONCERN,
        trigger=re.compile(r"(?<![\w.])(?:eval|exec)\s*\("),
        finding_message="Dynamic code evaluation (eval/exec) on potentially untrusted input.",
        severity=Severity.HIGH,
        quick_fix="Parse literals with ast.literal_eval() or dispatch through an explicit allow-list.",
        languages=ONLY_PYTHON,
    ),
    LineCheck(
        name="python_sql_string_building",
        concern=CONCERN,
        trigger=re.compile(r"\.(?:execute|executemany|raw)\s*\(\s*(?:f[\"']|[\"'].*[\"']\s*(?:%|\+|\.format\())"),
        # the statement literal itself must be followed by a parameters argument
        requires=re.compile(
            r"\.(?:execute|executemany|raw)\s*\(\s*[rRbBuUfF]{0,2}(?:\"[^\"]*\"|'[^']*')\s*,\s*[\w\[\(\{]"
        ),
        finding_message="SQL query built with string formatting and executed without bound parameters.",
        pass_message="SQL query passes bound parameters alongside the statement.",
        severity=Severity.HIGH,
        quick_fix="Use placeholders and pass values as the second argument to execute().",
        languages=ONLY_PYTHON,
    ),
    LineCheck(
        name="python_unsafe_yaml_load",
        concern=CONCERN,
        trigger=re.compile(r"\byaml\.(?:load|load_all)\s*\("),
        requires=re.compile(r"Loader\s*=\s*(?:yaml\.)?C?SafeLoader"),
        finding_message="yaml.load() without SafeLoader can construct arbitrary objects.",
        pass_message="yaml.load() is restricted to SafeLoader.",
        severity=Severity.HIGH,
        quick_fix="Use yaml.safe_load() or pass Loader=yaml.SafeLoader.",
        languages=ONLY_PYTHON,
    ),
    LineCheck(
        name="python_pickle_load",
        concern=CONCERN,
        trigger=re.compile(r"\b(?:pickle|cPickle|dill|marshal)\.loads?\s*\("),
        finding_message="Deserializing with pickle/marshal executes attacker-controlled payloads.",
        severity=Severity.HIGH,
        quick_fix="Exchange data as JSON or another data-only format.",
        languages=ONLY_PYTHON,
    ),
    LineCheck(
        name="python_unescaped_markup",
        concern=CONCERN,
        trigger=re.compile(r"\b(?:mark_safe|Markup|render_template_string)\s*\("),
        requires=re.compile(r"\bescape\s*\(|\bbleach\.clean\s*\("),
        finding_message="Markup is rendered without escaping its input.",
        pass_message="Markup input is escaped before rendering.",
        quick_fix="Escape values with markupsafe.escape() or sanitize with bleach.clean().",
        languages=ONLY_PYTHON,
    ),
    LineCheck(
        name="python_shell_injection",
        concern=CONCERN,
        trigger=re.compile(r"\b(?:os\.system|os\.popen|subprocess\.\w+\s*\(.*shell\s*=\s*True)"),
        requires=re.compile(r"\bshlex\.quote\s*\("),
        finding_message="Shell command is built from strings without quoting.",
        pass_message="Shell command arguments are quoted with shlex.quote().",
        severity=Severity.HIGH,
        quick_fix="Pass an argument list to subprocess without shell=True.",
        languages=ONLY_PYTHON,
    ),
)

PHP_RULES: Tuple[LineCheck, ...] = (
    LineCheck(
        name="php_eval",
        concern=CONCERN,
        trigger=re.compile(r"(?<![\w>$])(?:eval|assert|create_function)\s*\("),
        finding_message="Dynamic code evaluation in PHP.",
        severity=Severity.HIGH,
        quick_fix="Remove eval() and dispatch through explicit code paths.",
        languages=ONLY_PHP,
    ),
    LineCheck(
        name="php_raw_query",
        concern=CONCERN,
        trigger=re.compile(r"\b(?:mysqli_query|mysql_query|pg_query)\s*\(|->(?:query|exec)\s*\("),
        requires=re.compile(r"\b(?:prepare|real_escape_string|bind_param|bindValue|bindParam|quote)\b"),
        finding_message="Database query executed without prepared statements or escaping.",
        pass_message="Database query uses prepared statements or escaping.",
        severity=Severity.HIGH,
        quick_fix="Use PDO/mysqli prepared statements with bound parameters.",
        languages=ONLY_PHP,
    ),
    LineCheck(
        name="php_unescaped_output",
        concern=CONCERN,
        trigger=re.compile(r"\b(?:echo|print)\b.*\$_(?:GET|POST|REQUEST|COOKIE)"),
        requires=re.compile(r"\b(?:htmlspecialchars|htmlentities|strip_tags)\s*\("),
        finding_message="Request input is echoed without HTML escaping.",
        pass_message="Request input is escaped before output.",
        severity=Severity.HIGH,
        quick_fix="Wrap output in htmlspecialchars($value, ENT_QUOTES, 'UTF-8').",
        languages=ONLY_PHP,
    ),
    LineCheck(
        name="php_unserialize",
        concern=CONCERN,
        trigger=re.compile(r"\bunserialize\s*\("),
        requires=re.compile(r"allowed_classes"),
        finding_message="unserialize() without an allowed_classes restriction.",
        pass_message="unserialize() restricts allowed classes.",
        severity=Severity.HIGH,
        quick_fix="Prefer json_decode(), or pass ['allowed_classes' => false].",
        languages=ONLY_PHP,
    ),
    LineCheck(
        name="php_dynamic_include",
        concern=CONCERN,
        trigger=re.compile(r"\b(?:include|require)(?:_once)?\s*\(?\s*\$"),
        requires=re.compile(r"\bbasename\s*\("),
        finding_message="File inclusion path is built from a variable.",
        pass_message="Included path is reduced with basename().",
        severity=Severity.HIGH,
        quick_fix="Map user input to a fixed allow-list of include targets.",
        languages=ONLY_PHP,
    ),
)

JAVA_RULES: Tuple[LineCheck, ...] = (
    LineCheck(
        name="java_statement_concat",
        concern=CONCERN,
        trigger=re.compile(r"\.(?:executeQuery|executeUpdate|execute|addBatch)\s*\(\s*\"[^\"]*\"\s*\+"),
        requires=re.compile(r"\bPreparedStatement\b|\bprepareStatement\s*\("),
        finding_message="SQL statement concatenates values into the query text.",
        pass_message="SQL statement is executed through a PreparedStatement.",
        severity=Severity.HIGH,
        quick_fix="Use connection.prepareStatement() with ? placeholders.",
        languages=ONLY_JAVA,
    ),
    LineCheck(
        name="java_runtime_exec",
        concern=CONCERN,
        trigger=re.compile(r"\bRuntime\.getRuntime\(\)\.exec\s*\(|\bnew\s+ProcessBuilder\s*\("),
        finding_message="Operating system command executed from application code.",
        severity=Severity.HIGH,
        quick_fix="Avoid shelling out; if unavoidable, validate every argument against an allow-list.",
        languages=ONLY_JAVA,
    ),
    LineCheck(
        name="java_object_deserialization",
        concern=CONCERN,
        trigger=re.compile(r"\bnew\s+ObjectInputStream\s*\("),
        requires=re.compile(r"ObjectInputFilter|setObjectInputFilter|ValidatingObjectInputStream"),
        finding_message="Java deserialization without an input filter.",
        pass_message="Java deserialization is guarded by an input filter.",
        severity=Severity.HIGH,
        quick_fix="Install an ObjectInputFilter that allow-lists expected classes.",
        languages=ONLY_JAVA,
    ),
    LineCheck(
        name="java_unescaped_output",
        concern=CONCERN,
        trigger=re.compile(r"getWriter\(\)\.(?:print|println|write)\s*\(.*getParameter\s*\("),
        requires=re.compile(r"\b(?:escapeHtml4?|Encode\.forHtml\w*|HtmlUtils\.htmlEscape)\s*\("),
        finding_message="Request parameter written to the response without HTML encoding.",
        pass_message="Request parameter is HTML-encoded before output.",
        severity=Severity.HIGH,
        quick_fix="Encode output with OWASP Encoder (Encode.forHtml) or StringEscapeUtils.escapeHtml4.",
        languages=ONLY_JAVA,
    ),
    LineCheck(
        name="java_script_engine_eval",
        concern=CONCERN,
        trigger=re.compile(r"\b\w*[Ee]ngine\.eval\s*\("),
        finding_message="ScriptEngine.eval() evaluates dynamic code.",
        severity=Severity.HIGH,
        quick_fix="Do not evaluate scripts built from request data.",
        languages=ONLY_JAVA,
    ),
)

RULES: Tuple[LineCheck, ...] = PYTHON_RULES + PHP_RULES + JAVA_RULES


def get_rules() -> Tuple[LineCheck, ...]:
    return RULES
