"""Keyword classification of free-text questions.

Three independent readings are taken from the lowercased question:

* :func:`classify` buckets it into one of eleven question categories and
  folds that onto a report :class:`~seerengine.scoring.tables.Domain`;
* :func:`polarity` decides whether the asker wants to *push* (start, buy,
  confront) or *pull* (rest, wait, withdraw);
* :func:`has_negative_intent` spots "should I not / avoid" phrasing.

Matching is plain substring search over fixed keyword tables, so the
tables (not the code) are the tuning surface.

Two gates run before any of that.  :func:`validate_question` turns away
input too short or garbled to classify, and :func:`detect_crisis` flags
text that should get :data:`CRISIS_RESPONSE` instead of a reading.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Final

from ..scoring.tables import Domain

__all__ = [
    "CATEGORY_KEYWORDS",
    "CATEGORY_TO_DOMAIN",
    "CRISIS_PATTERNS",
    "CRISIS_RESPONSE",
    "Classification",
    "MEANINGFUL_WORDS",
    "Polarity",
    "PULL_KEYWORDS",
    "PUSH_KEYWORDS",
    "QuestionCategory",
    "QuestionCheck",
    "classify",
    "detect_crisis",
    "has_negative_intent",
    "is_gibberish",
    "polarity",
    "validate_question",
]


class QuestionCategory(StrEnum):
    LOVE = "love"
    CAREER = "career"
    MONEY = "money"
    COMMUNICATION = "communication"
    CONFLICT = "conflict"
    TIMING = "timing"
    HEALTH = "health"
    SOCIAL = "social"
    DECISIONS = "decisions"
    CREATIVITY = "creativity"
    SPIRITUAL = "spiritual"


class Polarity(StrEnum):
    PUSH = "push"
    PULL = "pull"
    NEUTRAL = "neutral"


MATCHED_CONFIDENCE: Final[float] = 0.8
UNMATCHED_CONFIDENCE: Final[float] = 0.2
DEFAULT_CATEGORY: Final[QuestionCategory] = QuestionCategory.TIMING

_Q = QuestionCategory

# Iteration order is the tie-break order.
CATEGORY_KEYWORDS: Mapping[QuestionCategory, tuple[str, ...]] = MappingProxyType(
    {
        _Q.LOVE: (
            "love", "relationship", "partner", "boyfriend", "girlfriend", "husband",
            "wife", "date", "dating", "romance", "romantic", "crush", "ex", "marriage",
            "marry", "confess", "feelings", "heart", "soulmate", "attraction",
            "attracted", "chemistry", "breakup", "break up", "together", "commitment",
            "kiss", "text", "message him", "message her",
        ),
        # bare "work" is handled by _WORK_RE so workouts stay out of career
        _Q.CAREER: (
            "job", "career", "promotion", "boss", "interview", "hire", "hired",
            "quit job", "resign", "business", "company", "professional", "office",
            "salary", "raise", "position", "role", "project", "deadline", "meeting",
            "presentation", "opportunity", "offer", "negotiate", "client", "coworker",
            "colleague",
        ),
        _Q.MONEY: (
            "money", "financial", "finance", "invest", "investment", "stock", "crypto",
            "buy", "purchase", "sell", "loan", "debt", "savings", "budget", "expensive",
            "afford", "rich", "wealth", "income", "spend", "spending", "bank",
            "mortgage", "rent", "price", "cost", "pay", "payment",
            "gamble", "gambling", "bet", "betting", "casino", "lottery", "bitcoin",
            "btc", "ethereum", "eth", "trade", "trading", "forex", "options", "futures",
        ),
        _Q.COMMUNICATION: (
            "tell", "say", "talk", "speak", "conversation", "communicate", "email",
            "call", "phone", "respond", "reply", "discuss", "explain", "share",
            "announce", "reveal", "admit", "confide", "express", "voice", "letter",
            "apology", "apologize", "confront", "ask", "question", "answer",
        ),
        _Q.CONFLICT: (
            "fight", "argue", "argument", "conflict", "disagree", "disagreement",
            "angry", "anger", "upset", "confront", "confrontation", "defend", "attack",
            "sue", "legal", "lawsuit", "dispute", "problem", "issue", "difficult",
            "challenge", "enemy", "rival", "compete", "competition",
        ),
        _Q.TIMING: (
            "when", "today", "tomorrow", "now", "soon", "wait", "time", "timing",
            "right time", "good time", "start", "begin", "launch", "initiate", "move",
            "travel", "trip", "vacation", "sign", "contract", "decision", "choose",
            "decide", "ready", "prepared",
        ),
        _Q.HEALTH: (
            "workout", "work out", "exercise", "gym", "run", "running", "jog",
            "jogging", "fitness", "health", "healthy", "diet", "eat", "eating", "food",
            "meal", "sleep", "rest", "meditation", "yoga", "sport", "sports",
            "training", "body", "weight", "muscle", "cardio", "stretch", "walk",
            "walking", "swim", "swimming", "bike", "cycling", "hike", "hiking",
        ),
        _Q.SOCIAL: (
            "friend", "friends", "party", "gathering", "event", "social", "hangout",
            "meet", "meeting", "network", "networking", "group", "community",
        ),
        _Q.DECISIONS: (
            "decide", "decision", "choose", "choice", "option", "should i",
            "should we", "right choice", "best choice", "pick", "select",
        ),
        _Q.CREATIVITY: (
            "creative", "create", "art", "artistic", "write", "writing", "paint",
            "music", "design", "idea", "inspiration", "project", "build", "make",
        ),
        _Q.SPIRITUAL: (
            "spiritual", "spirit", "soul", "meditation", "pray", "prayer", "faith",
            "universe", "cosmic", "divine", "energy", "healing", "intuition",
        ),
    }
)

CATEGORY_TO_DOMAIN: Mapping[QuestionCategory, Domain] = MappingProxyType(
    {
        _Q.LOVE: Domain.LOVE,
        _Q.CAREER: Domain.CAREER,
        _Q.MONEY: Domain.MONEY,
        _Q.COMMUNICATION: Domain.SOCIAL,
        _Q.CONFLICT: Domain.DECISIONS,
        _Q.TIMING: Domain.DECISIONS,
        _Q.HEALTH: Domain.HEALTH,
        _Q.SOCIAL: Domain.SOCIAL,
        _Q.DECISIONS: Domain.DECISIONS,
        _Q.CREATIVITY: Domain.CREATIVITY,
        _Q.SPIRITUAL: Domain.SPIRITUAL,
    }
)

PUSH_KEYWORDS: tuple[str, ...] = (
    "extra", "more", "harder", "push", "start", "begin", "launch", "initiate",
    "ask out", "confess", "confront", "challenge", "apply", "pursue", "chase",
    "accelerate", "intensify", "invest", "commit", "engage", "attack", "fight",
    "overtime", "extra hours", "work late", "stay late", "hustle", "grind",
    "take on", "accept", "say yes", "go for", "dive in", "jump in",
    "buy", "purchase", "spend", "gamble", "bet", "trade", "crypto", "btc",
    "bitcoin", "stock", "stocks", "investment", "put money",
)

PULL_KEYWORDS: tuple[str, ...] = (
    "rest", "relax", "early", "leave", "quit", "stop", "pause", "break",
    "home", "go home", "take off", "slow down", "step back", "retreat",
    "decline", "refuse", "say no", "skip", "pass", "delay", "postpone",
    "wait", "hold off", "ease", "chill", "unwind", "recover", "heal",
    "less", "reduce", "cut back", "dial down", "take it easy",
)

_WORK_RE = re.compile(r"\b(work|working)\b")
_WORKOUT_RE = re.compile(r"\b(work\s*out|workout|working\s*out)\b")

_NEGATIVE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        r"\bshould\s*(i|we)\s*(not|avoid|skip|wait|delay|hold off|stop|quit|cancel|refuse|reject)\b",
        r"\bshouldn'?t\s*(i|we)\b",
        r"\bis\s*it\s*(a\s*)?bad\s*(idea|time|day)\b",
        r"\bdon'?t\s*(i|we)\b",
        r"\bavoid\b",
        r"\bstay\s*away\b",
        r"\bnot\s*(a\s*)?(good|right|best)\s*(time|idea|day)\b",
    )
)


@dataclass(frozen=True)
class Classification:
    category: QuestionCategory
    confidence: float
    hits: Mapping[QuestionCategory, int]

    def __post_init__(self) -> None:
        object.__setattr__(self, "hits", MappingProxyType(dict(self.hits)))

    @property
    def domain(self) -> Domain:
        return CATEGORY_TO_DOMAIN[self.category]


def _count(text: str, keywords: tuple[str, ...]) -> int:
    return sum(1 for keyword in keywords if keyword in text)


def classify(question: str) -> Classification:
    """Bucket ``question`` by keyword hits.

    The category with the most hits wins, ties going to the earlier entry
    of :data:`CATEGORY_KEYWORDS`; with no hits at all the category falls
    back to ``timing`` at low confidence.
    """

    text = question.lower()
    hits = {category: _count(text, keywords) for category, keywords in CATEGORY_KEYWORDS.items()}
    if _WORK_RE.search(text) and not _WORKOUT_RE.search(text):
        hits[_Q.CAREER] += 1

    best, best_hits = DEFAULT_CATEGORY, 0
    for category, count in hits.items():
        if count > best_hits:
            best, best_hits = category, count

    confidence = MATCHED_CONFIDENCE if sum(hits.values()) else UNMATCHED_CONFIDENCE
    return Classification(category=best, confidence=confidence, hits=hits)


def polarity(question: str) -> Polarity:
    text = question.lower()
    push = _count(text, PUSH_KEYWORDS)
    pull = _count(text, PULL_KEYWORDS)
    if push > pull:
        return Polarity.PUSH
    if pull > push:
        return Polarity.PULL
    return Polarity.NEUTRAL


def has_negative_intent(question: str) -> bool:
    """True for avoidance phrasing such as "should I not" or "shouldn't I"."""

    text = question.lower()
    return any(pattern.search(text) for pattern in _NEGATIVE_PATTERNS)


# --------------------------------------------------------------------------- gates

MIN_QUESTION_LENGTH: Final[int] = 8
MIN_QUESTION_WORDS: Final[int] = 2
MAX_CONSONANT_RATIO: Final[float] = 4.0

# Matched against the whole lowercased, stripped question.
_GIBBERISH_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        r"[a-z]{1,3}",
        r"(.)\1+",
        r"[^a-z]*",
        r"[a-z]+",
        r"test|testing|asdf|qwerty|hello|hi|hey|yo|ok|okay|yes|no|maybe",
    )
)

# Words that rescue an otherwise gibberish-looking input.
MEANINGFUL_WORDS: frozenset[str] = frozenset(
    {
        "should", "will", "can", "is", "are", "do", "does", "would", "could",
        "today", "tomorrow", "now", "time", "good", "right", "love", "work",
        "job", "money", "relationship", "partner", "ask", "tell", "start",
        "begin", "go", "move", "buy", "sell", "invest", "travel", "meet",
        "date", "marry", "confess", "apply", "quit", "change", "try",
    }
)

_CONSONANTS_RE = re.compile(r"[bcdfghjklmnpqrstvwxyz]")
_VOWELS_RE = re.compile(r"[aeiou]")
_WORD_PUNCTUATION_RE = re.compile(r"[?.,!]")

CRISIS_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        r"\b(kill|end)\s+(my|him|her|them)self\b",
        r"\bsuicid",
        r"\bself[- ]?harm",
        r"\bwant\s+to\s+die\b",
        r"\bdon'?t\s+want\s+to\s+(live|be\s+alive|exist)\b",
        r"\bend\s+(my|it\s+all|everything)\b",
        r"\bnot\s+worth\s+living\b",
        r"\bno\s+(reason|point)\s+(to|in)\s+(live|living|go\s+on)\b",
        r"\bbetter\s+off\s+dead\b",
        r"\bcan'?t\s+(go\s+on|take\s+(it|this)\s+anymore)\b",
        r"\bhurt\s+myself\b",
        r"\bcutting\s+myself\b",
    )
)

CRISIS_RESPONSE: Final[str] = """You are not alone. What you are feeling matters, and this app is not the right place for this.

Please reach out to someone who can help:

US: Call or text 988 (24/7)
UK: Call 116 123 (Samaritans, 24/7)
Canada: Call or text 988 (24/7)
Australia: Call 13 11 14 (Lifeline, 24/7)
EU: Call 116 123
Japan: 0120-279-338 (よりそいホットライン, 24/7)
Vietnam: 1800 599 920
International: findahelpline.com

You deserve support from a real person, not a reading from the stars."""


@dataclass(frozen=True)
class QuestionCheck:
    """Outcome of :func:`validate_question`; ``error`` is ``None`` when valid."""

    valid: bool
    error: str | None = None
    suggestion: str | None = None

    def __bool__(self) -> bool:
        return self.valid

    def as_dict(self) -> dict[str, object]:
        return {"valid": self.valid, "error": self.error, "suggestion": self.suggestion}


_TOO_SHORT = QuestionCheck(
    False, "Question too short", 'Ask a complete question like "Should I ask for a raise today?"'
)
_GIBBERISH = QuestionCheck(
    False,
    "Please ask a real question",
    'Try asking something like "Is today a good day for important decisions?"',
)
_TOO_FEW_WORDS = QuestionCheck(
    False, "Question needs more context", 'Add more details like "Should I apply for this job?"'
)


def is_gibberish(text: str) -> bool:
    cleaned = text.strip().lower()
    if any(pattern.fullmatch(cleaned) for pattern in _GIBBERISH_PATTERNS):
        words = (_WORD_PUNCTUATION_RE.sub("", word) for word in cleaned.split())
        if not any(word in MEANINGFUL_WORDS for word in words):
            return True

    # keyboard mashing
    consonants = len(_CONSONANTS_RE.findall(cleaned))
    vowels = len(_VOWELS_RE.findall(cleaned))
    if vowels:
        return consonants / vowels > MAX_CONSONANT_RATIO
    return len(cleaned) > 3


def validate_question(question: str) -> QuestionCheck:
    """Reject questions too short, too vague or too garbled to read.

    Checks run in order (length, gibberish, word count) and the first
    failure is returned.  Any kind of question passes, not only yes/no
    ones.
    """

    trimmed = question.strip()
    if len(trimmed) < MIN_QUESTION_LENGTH:
        return _TOO_SHORT
    if is_gibberish(trimmed):
        return _GIBBERISH
    if len(trimmed.split()) < MIN_QUESTION_WORDS:
        return _TOO_FEW_WORDS
    return QuestionCheck(True)


def detect_crisis(text: str) -> bool:
    """True when ``text`` reads as personal distress rather than a question.

    Callers should answer with :data:`CRISIS_RESPONSE` instead of a reading.
    """

    lowered = text.strip().lower()
    return any(pattern.search(lowered) for pattern in CRISIS_PATTERNS)
