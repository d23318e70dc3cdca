"""
Resilient extraction of structured values from language-model output.

Models frequently wrap their payload in prose, leave newlines unescaped, use
single quotes, or emit non-finite numbers. ``extract`` runs an ordered chain of
pure step functions over the raw text and returns the first value that
validates as the fallback's model; when nothing applies it returns the
fallback itself. No step raises to the caller.
"""
import json
import re
from functools import lru_cache
from typing import Any, Callable, FrozenSet, List, Literal, Optional, Sequence, Type, TypeVar, get_args, get_origin

from pydantic import BaseModel, ValidationError, create_model

from deep_research_agent.logging import get_logger
from deep_research_agent.parsing.fields import normalize_fields

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

ExtractionStep = Callable[[str, T], Optional[T]]

_NON_FINITE_TOKENS = {"Infinity", "-Infinity", "NaN"}
_NON_FINITE_AT = re.compile(r"-?(?:Infinity|NaN)(?![\w\"'])")
_BARE_NON_FINITE = re.compile(r"""^\s*(["']?)-?(?:Infinity|NaN)\1\s*$""")
_VALUE_OPENERS = ":[,"
_VALUE_CLOSERS = ",}]"
_CODE_FENCE = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_QUOTE_BREAKING = re.compile(r"[\"\\]")


class _RejectedConstant(ValueError):
    pass


def _reject_constant(token: str) -> Any:
    raise _RejectedConstant(token)


def _ends_value(text: str, i: int) -> bool:
    while i < len(text) and text[i].isspace():
        i += 1
    return i >= len(text) or text[i] in _VALUE_CLOSERS


def has_non_finite_value(text: str) -> bool:
    """
    Whether a non-finite token stands as a whole value of structured text.

    Only positions outside string literals count: a token (bare or quoted)
    opened by ``:``, ``[`` or ``,`` and closed by ``,``, ``}``, ``]`` or the
    end of the text. Tokens inside string values are ordinary text.
    """
    last = ""
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == '"' or (ch == "'" and last and last in "{" + _VALUE_OPENERS):
            end = _scan_string(text, i)
            if last and last in _VALUE_OPENERS and text[i + 1:end] in _NON_FINITE_TOKENS and _ends_value(text, end + 1):
                return True
            last = ch
            i = end + 1
            continue
        if last and last in _VALUE_OPENERS and not ch.isspace():
            match = _NON_FINITE_AT.match(text, i)
            if match and _ends_value(text, match.end()):
                return True
        if not ch.isspace():
            last = ch
        i += 1
    return False


def is_rejected(raw: str) -> bool:
    """
    Whether raw text must resolve to the fallback without any recovery.

    Embedded NUL characters are rejected, as are non-finite numeric tokens
    standing alone or as a whole value of structured text, quoted or not.
    Prose or string values that merely mention "NaN" are not rejected.
    """
    if "\x00" in raw or _BARE_NON_FINITE.match(raw):
        return True
    if "{" not in raw and "[" not in raw:
        return False
    return has_non_finite_value(raw)


def _contains_non_finite(value: Any) -> bool:
    if isinstance(value, float):
        return value != value or value in (float("inf"), float("-inf"))
    if isinstance(value, str):
        return value in _NON_FINITE_TOKENS
    if isinstance(value, list):
        return any(_contains_non_finite(item) for item in value)
    if isinstance(value, dict):
        return any(_contains_non_finite(item) for item in value.values())
    return False


def _loads(text: str) -> Optional[Any]:
    """Parse JSON allowing literal control characters inside strings; None on failure."""
    try:
        parsed = json.loads(text, strict=False, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return None
    if not isinstance(parsed, (dict, list)) or _contains_non_finite(parsed):
        return None
    return parsed


def _scan_string(text: str, start: int) -> int:
    """Index of the closing quote for the string opening at ``start`` (len(text) if unterminated)."""
    quote = text[start]
    i = start + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == quote:
            return i
        i += 1
    return len(text)


def normalize_quotes(text: str) -> str:
    """
    Rewrite a JavaScript/Python-style literal into strict JSON.

    Single-quoted strings become double-quoted, bare object keys get quoted and
    Python ``True``/``False``/``None`` become their JSON spellings. Text inside
    double-quoted strings is left untouched.
    """
    out: List[str] = []
    last_significant = ""
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            end = _scan_string(text, i)
            out.append(text[i:end + 1])
            last_significant = '"'
            i = end + 1
        elif ch == "'":
            end = _scan_string(text, i)
            body = text[i + 1:end]
            body = body.replace("\\'", "'").replace('"', '\\"')
            out.append(f'"{body}"')
            last_significant = '"'
            i = end + 1
        elif ch.isalpha() or ch == "_":
            j = i
            while j < n and (text[j].isalnum() or text[j] == "_"):
                j += 1
            word = text[i:j]
            k = j
            while k < n and text[k] in " \t\r\n":
                k += 1
            if last_significant in ("{", ",") and k < n and text[k] == ":":
                out.append(f'"{word}"')
            else:
                out.append({"True": "true", "False": "false", "None": "null"}.get(word, word))
            last_significant = word[-1]
            i = j
        else:
            out.append(ch)
            if not ch.isspace():
                last_significant = ch
            i += 1
    return "".join(out)


def outer_json_span(text: str) -> Optional[str]:
    """
    Cut stray prose around the payload.

    Returns the substring from the first ``{`` or ``[`` to the last matching
    closer of the same kind, or None when there is no such span.
    """
    starts = [idx for idx in (text.find("{"), text.find("[")) if idx != -1]
    if not starts:
        return None
    start = min(starts)
    closer = "}" if text[start] == "{" else "]"
    end = text.rfind(closer)
    if end <= start:
        return None
    return text[start:end + 1]


def first_object_array(text: str) -> Optional[str]:
    """
    Return the first bracketed array-of-objects substring, bracket-matched.

    Brackets inside quoted strings are ignored. Returns None when no ``[``
    opens directly onto a ``{`` or the array never closes.
    """
    for match in re.finditer(r"\[\s*\{", text):
        start = match.start()
        depth = 0
        i = start
        while i < len(text):
            ch = text[i]
            if ch in ('"', "'"):
                i = _scan_string(text, i) + 1
                continue
            if ch in "[{":
                depth += 1
            elif ch in "]}":
                depth -= 1
                if depth == 0:
                    return text[start:i + 1] if ch == "]" else None
            i += 1
        return None
    return None


def parse_json_safely(raw: Optional[str]) -> Optional[Any]:
    """
    Strict-parse step exposed on its own.

    Tries the raw text, the contents of a code fence, and the outermost
    ``{...}``/``[...]`` span, each as-is and after quote normalization.

    Args:
        raw: Model output

    Returns:
        Parsed dict or list, or None if nothing parses or the text is rejected
    """
    if not isinstance(raw, str) or not raw.strip() or is_rejected(raw):
        return None
    candidates: List[str] = [raw.strip()]
    fence = _CODE_FENCE.search(raw)
    if fence:
        candidates.append(fence.group(1).strip())
    span = outer_json_span(raw)
    if span:
        candidates.append(span)
    seen = set()
    for candidate in candidates:
        if candidate in seen:
            continue
        seen.add(candidate)
        parsed = _loads(candidate)
        if parsed is None and "'" in candidate:
            parsed = _loads(normalize_quotes(candidate))
        if parsed is not None:
            return parsed
    return None


def _fields(fallback: BaseModel) -> List[str]:
    return list(type(fallback).model_fields)


def _is_text_annotation(annotation: Any) -> bool:
    if annotation is str:
        return True
    return get_origin(annotation) is Literal and all(isinstance(arg, str) for arg in get_args(annotation))


def _text_fields(fallback: BaseModel) -> List[str]:
    return [name for name, field in type(fallback).model_fields.items() if _is_text_annotation(field.annotation)]


@lru_cache(maxsize=None)
def declared_fields(model_class: Type[BaseModel]) -> FrozenSet[str]:
    """Field names of a model and of every model nested in its annotations."""
    names = set(model_class.model_fields)
    pending = [field.annotation for field in model_class.model_fields.values()]
    while pending:
        annotation = pending.pop()
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            if annotation is not model_class:
                names |= declared_fields(annotation)
            continue
        pending.extend(get_args(annotation))
    return frozenset(names)


def _list_fields(fallback: BaseModel) -> List[str]:
    return [
        name for name, field in type(fallback).model_fields.items()
        if get_origin(field.annotation) in (list, List) or field.annotation is list
    ]


def _splice(fallback: T, update: dict) -> Optional[T]:
    """Validate ``update`` merged over the fallback's values; None if it does not fit."""
    try:
        return type(fallback).model_validate({**fallback.model_dump(), **update})
    except ValidationError:
        return None


def _coerce(parsed: Any, fallback: T) -> Optional[T]:
    parsed = normalize_fields(parsed, declared_fields(type(fallback)))
    if isinstance(parsed, dict):
        known = {key: value for key, value in parsed.items() if key in type(fallback).model_fields}
        if not known:
            return None
        return _splice(fallback, known)
    if isinstance(parsed, list):
        list_fields = _list_fields(fallback)
        if not list_fields:
            return None
        return _splice(fallback, {list_fields[0]: parsed})
    return None


def _decode_string_body(body: str) -> str:
    try:
        return json.loads(f'"{body}"', strict=False)
    except ValueError:
        return body.replace('\\"', '"').replace("\\n", "\n")


def find_quoted_field(raw: str, field_name: str) -> Optional[str]:
    """
    Regex-extract the string value of ``"field_name": "..."``.

    Escaped quotes inside the value are honoured; single-quoted keys and
    values are recognised too.

    Returns:
        The decoded value, or None when the field is absent
    """
    name = re.escape(field_name)
    double = re.search(rf'"{name}"\s*:\s*"((?:[^"\\]|\\.)*)"', raw, re.DOTALL)
    if double:
        return _decode_string_body(double.group(1))
    single = re.search(rf"'{name}'\s*:\s*'((?:[^'\\]|\\.)*)'", raw, re.DOTALL)
    if single:
        return single.group(1).replace("\\'", "'").replace("\\n", "\n")
    return None


def strict_parse_step(raw: str, fallback: T) -> Optional[T]:
    parsed = parse_json_safely(raw)
    if parsed is None:
        return None
    return _coerce(parsed, fallback)


def plain_text_step(raw: str, fallback: T) -> Optional[T]:
    """
    Prose without any brackets fills the fallback's only text field.

    Bracket-free prose ends the chain here: when the fallback has no single
    text field, or the prose does not validate in it, the fallback is returned.
    """
    if any(ch in raw for ch in "{}[]") or not raw.strip():
        return None
    text_fields = _text_fields(fallback)
    if len(text_fields) != 1:
        return fallback
    field = text_fields[0]
    return _splice(fallback, {field: raw}) or _splice(fallback, {field: raw.strip()}) or fallback


def content_field_step(raw: str, fallback: T) -> Optional[T]:
    if "content" not in type(fallback).model_fields:
        return None
    content = find_quoted_field(raw, "content")
    if content is None:
        return None
    return _splice(fallback, {"content": content})


def array_field_step(raw: str, fallback: T) -> Optional[T]:
    list_fields = _list_fields(fallback)
    if not list_fields:
        return None
    fragment = first_object_array(raw)
    if fragment is None:
        return None
    parsed = _loads(fragment)
    if parsed is None:
        parsed = _loads(normalize_quotes(fragment))
    if not isinstance(parsed, list):
        return None
    return _splice(fallback, {list_fields[0]: normalize_fields(parsed, declared_fields(type(fallback)))})


def sanitized_text_step(raw: str, fallback: T) -> Optional[T]:
    """Last resort: strip control and quote-breaking characters into the first field."""
    fields = _fields(fallback)
    if not fields:
        return None
    cleaned = _QUOTE_BREAKING.sub("", _CONTROL_CHARS.sub("", raw)).strip()
    if not cleaned:
        return None
    return _splice(fallback, {fields[0]: cleaned})


EXTRACTION_STEPS: Sequence[ExtractionStep] = (
    strict_parse_step,
    plain_text_step,
    content_field_step,
    array_field_step,
    sanitized_text_step,
)


def extract(raw: Optional[str], fallback: T, steps: Sequence[ExtractionStep] = EXTRACTION_STEPS) -> T:
    """
    Recover a value shaped like ``fallback`` from model output.

    Args:
        raw: Raw model text (None and non-text values resolve to the fallback)
        fallback: Model instance returned when nothing can be recovered
        steps: Ordered extraction steps; the first non-None result wins

    Returns:
        A validated instance of the fallback's model class
    """
    if not isinstance(raw, str) or not raw.strip():
        return fallback
    if is_rejected(raw):
        logger.debug("extraction_rejected_input", shape=type(fallback).__name__)
        return fallback
    for step in steps:
        try:
            result = step(raw, fallback)
        except Exception as e:
            logger.debug("extraction_step_failed", step=step.__name__, error=str(e))
            continue
        if result is not None:
            return result
    logger.debug("extraction_fell_back", shape=type(fallback).__name__, raw_preview=raw[:100])
    return fallback


@lru_cache(maxsize=None)
def _text_field_model(field_name: str):
    return create_model(f"TextField_{field_name}", **{field_name: (str, "")})


def extract_text_field(raw: Optional[str], field_name: str = "content") -> str:
    """
    Return only the prose body of a model response.

    Runs the strict-parse, plain-prose and quoted-field steps for
    ``field_name``; when no structure yields the field, the raw text itself is
    returned. Rejected input returns an empty string.

    Args:
        raw: Raw model text
        field_name: Name of the text field to pull out

    Returns:
        The field's text, or ``raw`` when no structure is found
    """
    if not isinstance(raw, str):
        return ""
    if is_rejected(raw):
        return ""
    parsed = parse_json_safely(raw)
    if isinstance(parsed, dict):
        value = normalize_fields(parsed, {field_name}).get(field_name)
        if isinstance(value, str):
            return value
    quoted = find_quoted_field(raw, field_name)
    if quoted is not None:
        return quoted
    model = _text_field_model(field_name)
    result = extract(raw, model(), steps=(plain_text_step,))
    return getattr(result, field_name) or raw
