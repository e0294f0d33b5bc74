from reposcan.rules import RuleOutcome
from reposcan.rules.cors import SUBJECT, get_rules
from reposcan.severity import Severity


def _evaluate(content, path="server.js"):
    return RuleOutcome.combine(rule.evaluate(path, content) for rule in get_rules())


def test_wildcard_origin_is_a_single_high_finding():
    outcome = _evaluate("app.use(cors({origin: '*'}))")

    assert len(outcome.findings) == 1
    finding = outcome.findings[0]
    assert finding.rule == "cors_wildcard_origin"
    assert finding.message == "CORS allows all origins (*). This is potentially insecure."
    assert finding.severity is Severity.HIGH
    assert outcome.passed_checks == ()


def test_bare_cors_call_allows_every_origin():
    outcome = _evaluate("app.use(cors());")

    assert [finding.rule for finding in outcome.findings] == ["cors_wildcard_origin"]


def test_explicit_configuration_passes():
    content = "\n".join(
        [
            "app.use(cors({",
            "  origin: ['https://example.com'],",
            "  methods: ['GET', 'POST'],",
            "  allowedHeaders: ['Content-Type'],",
            "  credentials: false,",
            "}));",
        ]
    )

    outcome = _evaluate(content)

    assert outcome.findings == ()
    assert [check.rule for check in outcome.passed_checks] == [
        "cors_wildcard_origin",
        "cors_wildcard_origin",
        "cors_wildcard_methods",
        "cors_wildcard_headers",
        "cors_credentials",
    ]


def test_wildcards_in_python_and_raw_headers():
    content = "\n".join(
        [
            "app.add_middleware(CORSMiddleware, allow_origins=['*'])",
            "    allow_methods=['*'],",
            "res.setHeader('Access-Control-Allow-Origin', '*');",
            "    allow_credentials=True,",
        ]
    )

    outcome = _evaluate(content, path="main.py")

    assert [(finding.rule, finding.line) for finding in outcome.findings] == [
        ("cors_wildcard_origin", 1),
        ("cors_wildcard_origin", 3),
        ("cors_wildcard_methods", 2),
        ("cors_credentials", 4),
    ]
    assert outcome.findings[-1].severity is Severity.LOW


def test_subject_marker_is_case_insensitive():
    assert SUBJECT.search("from flask_cors import CORS")
    assert SUBJECT.search("app.use(Cors())")
    assert not SUBJECT.search("app.listen(3000)")
