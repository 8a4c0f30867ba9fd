"""
Typed access to program registration answers.

Raw answers are a JSON map keyed by question id, with a reserved `_fixed`
sub-map holding the fields every registration form collects. Everything
downstream goes through parse_answers() instead of probing the raw dict.
"""
import json
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

FIXED_KEY = '_fixed'
UNKNOWN_REGISTRANT = 'Unknown'

AnswerValue = str | list[str]


@dataclass(frozen=True)
class FixedFields:
    name: str | None = None
    mobile: str | None = None
    panchayath_id: str | None = None
    panchayath_name: str | None = None
    ward: str | None = None

    @classmethod
    def from_raw(cls, raw: dict) -> 'FixedFields':
        values = {}
        for key in ('name', 'mobile', 'panchayath_id', 'panchayath_name', 'ward'):
            value = _coerce_scalar(raw.get(key))
            values[key] = value or None
        return cls(**values)


@dataclass(frozen=True)
class RegistrationAnswers:
    """
    Parsed answers.

    custom holds every top-level entry except `_fixed`: question-id keyed
    answers plus legacy keys such as `full_name`. raw_fixed keeps every
    scalar inside `_fixed`.
    """
    fixed: FixedFields = field(default_factory=FixedFields)
    custom: dict[str, AnswerValue] = field(default_factory=dict)
    raw_fixed: dict[str, str] = field(default_factory=dict)

    def get(self, question_id) -> AnswerValue | None:
        return self.custom.get(str(question_id))

    def lookup(self, key: str) -> str | None:
        """Top-level value first, then the same key inside `_fixed`."""
        value = self.custom.get(key)
        if isinstance(value, str) and value:
            return value
        value = self.raw_fixed.get(key)
        return value or None


def _coerce_scalar(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _coerce_value(key: str, value) -> AnswerValue | None:
    if isinstance(value, list):
        items = [_coerce_scalar(item) for item in value]
        return [item for item in items if item is not None]
    if isinstance(value, dict):
        logger.debug(f'Dropping nested answer for key {key}')
        return None
    return _coerce_scalar(value)


def parse_answers(raw) -> RegistrationAnswers:
    """
    Parse raw registration answers.

    Accepts a dict, a JSON string or None. A non-mapping top level yields
    empty answers; malformed entries are dropped rather than raising.
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.debug('Registration answers are not valid JSON')
            return RegistrationAnswers()

    if not isinstance(raw, dict):
        return RegistrationAnswers()

    fixed_raw = raw.get(FIXED_KEY)
    if not isinstance(fixed_raw, dict):
        if fixed_raw is not None:
            logger.debug('Ignoring non-mapping _fixed block')
        fixed_raw = {}

    custom = {}
    for key, value in raw.items():
        if key == FIXED_KEY:
            continue
        coerced = _coerce_value(key, value)
        if coerced is not None:
            custom[str(key)] = coerced

    raw_fixed = {}
    for key, value in fixed_raw.items():
        coerced = _coerce_scalar(value)
        if coerced is not None:
            raw_fixed[str(key)] = coerced

    return RegistrationAnswers(
        fixed=FixedFields.from_raw(fixed_raw),
        custom=custom,
        raw_fixed=raw_fixed,
    )


def answer_display(value, placeholder: str = '') -> str:
    """Render an answer for display: lists comma-joined, blanks as placeholder."""
    if value is None:
        return placeholder
    if isinstance(value, list):
        joined = ', '.join(str(item) for item in value)
        return joined or placeholder
    text = str(value)
    return text if text != '' else placeholder


def registrant_name(answers) -> str:
    """
    Best-effort registrant name: full_name, then name, then 'Unknown'.

    Accepts raw answers or an already parsed RegistrationAnswers.
    """
    if not isinstance(answers, RegistrationAnswers):
        answers = parse_answers(answers)
    for key in ('full_name', 'name'):
        value = answers.lookup(key)
        if value:
            return value
    return UNKNOWN_REGISTRANT
