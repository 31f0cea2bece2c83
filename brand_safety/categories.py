"""
Safety category term tables.

Each category is a frozen CategoryDefinition with tiers ordered from the
highest to the lowest severity. The tables are handed to SafetyEvaluator at
construction, so evaluators with different tables can run side by side.
Hate speech, self harm and illegal activities sit one tier higher than the
rest: a strong hit there is VERY_HIGH, not HIGH.
"""
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Pattern, Tuple

from brand_safety.models import RiskLevel


@lru_cache(maxsize=4096)
def term_pattern(term: str) -> Pattern[str]:
    """Whole-word, case-insensitive pattern so 'hell' never matches 'shell'."""
    return re.compile(rf"(?<!\w){re.escape(term.strip())}(?!\w)", re.IGNORECASE)


@dataclass(frozen=True)
class CategoryTier:
    level: RiskLevel
    terms: Tuple[str, ...] = ()
    patterns: Tuple[Pattern[str], ...] = ()

    def first_match(self, text: str):
        """Return the matched term (or pattern text), or None."""
        for term in self.terms:
            if term_pattern(term).search(text):
                return term
        for pattern in self.patterns:
            match = pattern.search(text)
            if match:
                return match.group(0)
        return None


@dataclass(frozen=True)
class CategoryDefinition:
    name: str
    label: str
    tiers: Tuple[CategoryTier, ...]


_VH, _H, _M, _L = RiskLevel.VERY_HIGH, RiskLevel.HIGH, RiskLevel.MEDIUM, RiskLevel.LOW

# Letters may repeat or be split by symbols and digits, never by whitespace.
_GAP = r"(?:[^\w\s]|[_\d])*"


def _obfuscated(word: str, suffixes: str = "") -> Pattern[str]:
    body = _GAP.join(f"{re.escape(ch)}+" for ch in word)
    tail = f"(?:{suffixes})?" if suffixes else ""
    return re.compile(rf"(?<!\w){body}{tail}(?!\w)", re.IGNORECASE)


SEXUAL_CONTENT = CategoryDefinition(
    name="sexual_content",
    label="Sexual content",
    tiers=(
        CategoryTier(_H, (
            "sexual activity", "adult services", "adult entertainment", "sexual content",
            "explicit material", "mature audiences only", "pornography", "explicit sex",
            "sexual intercourse", "obscene", "xxx", "adult content", "sexually explicit",
            "pornographic",
        )),
        CategoryTier(_M, (
            "sexual tension", "sexual references", "suggestive content", "intimate moments",
            "romantic encounter", "nude", "sexually suggestive", "erotic", "sexual",
            "sensual", "intimate", "provocative", "seductive",
        )),
        CategoryTier(_L, ("kissing", "romance", "dating", "flirting", "affection")),
    ),
)

VIOLENCE = CategoryDefinition(
    name="violence",
    label="Violence",
    tiers=(
        CategoryTier(_H, (
            "teach them a lesson", "make them pay", "get what they deserve", "hurt them",
            "make them hurt", "make them suffer", "murder", "killing", "terrorist attack",
            "death", "harm", "hurt",
        )),
        CategoryTier(_M, (
            "show them what happens", "they will regret", "make them afraid", "put an end to",
            "they won't know what hit them", "fight", "assault", "violent", "attack", "punch",
            "kick", "suffer", "pain", "blood", "wound", "injury",
        )),
        CategoryTier(_L, ("tension", "combat", "aggressive", "pay for")),
    ),
)

HATE_SPEECH = CategoryDefinition(
    name="hate_speech",
    label="Hate speech",
    tiers=(
        CategoryTier(_VH, (
            "hate toward", "hate against", "should go back to", "don't belong here",
            "are all the same", "are inferior", "should be banned", "shouldn't have rights",
            "hate speech", "racial slur", "bigotry", "racism", "sexism", "homophobia",
            "xenophobia", "antisemitism", "islamophobia", "transphobia", "supremacist",
        )),
        CategoryTier(_H, (
            "those people", "you people", "that group", "aren't like us",
            "don't share our values", "don't fit in", "discriminatory", "prejudice",
            "stereotyping", "derogatory", "intolerant", "hateful",
        )),
        CategoryTier(_M, ("insensitive", "generalization", "stereotype")),
    ),
)

HARASSMENT = CategoryDefinition(
    name="harassment",
    label="Harassment",
    tiers=(
        CategoryTier(_H, (
            "put fear into", "they better watch out", "they'll be sorry", "harassment",
            "bullying", "stalking", "threaten",
        )),
        CategoryTier(_M, (
            "won't get away with", "they deserve what's coming", "consequences of ignoring",
            "intimidation", "threatening", "mocking", "bully", "humiliate", "ridicule",
            "shame", "embarrass",
        )),
    ),
)

SELF_HARM = CategoryDefinition(
    name="self_harm",
    label="Self harm",
    tiers=(
        CategoryTier(_VH, (
            "ways to kill", "how to commit suicide", "methods of suicide", "want to end it all",
            "no reason to go on", "better off without me", "nobody would miss me",
            "can't take it anymore", "suicide", "self-harm", "self-injury", "kill myself",
            "end my life", "take my life", "don't want to live", "want to die", "hurt myself",
        )),
        CategoryTier(_H, (
            "tired of living", "what's the point", "life is too hard", "no one cares about me",
            "world would be better without me", "eating disorder", "self-destructive",
            "suicidal", "anorexia", "bulimia", "destructive behavior", "self-hatred",
        )),
        CategoryTier(_M, ("hopeless", "despair", "worthless", "painful existence")),
    ),
)

ILLEGAL_ACTIVITIES = CategoryDefinition(
    name="illegal_activities",
    label="Illegal activities",
    tiers=(
        CategoryTier(_VH, (
            "how to make drugs", "where to buy illegal", "how to hack into", "how to steal",
            "avoiding law enforcement", "commit fraud", "without getting caught",
            "drug trafficking", "illegal weapon", "terrorism", "child abuse",
            "human trafficking", "smuggling", "money laundering", "illegal drugs",
        )),
        CategoryTier(_H, (
            "breaking the law", "illegal ways to", "ways around the system", "bypass security",
            "fake documentation", "illicit content", "fraud", "counterfeit", "illegal",
            "theft", "stolen", "black market", "dark web", "scam",
        )),
        CategoryTier(_M, (
            "copyright infringement", "circumvent", "loophole", "evade", "avoid detection",
        )),
    ),
)

PROFANITY = CategoryDefinition(
    name="profanity",
    label="Profanity",
    tiers=(
        CategoryTier(_H, patterns=(
            _obfuscated("fuck", "s|ed|er|ers|ing|in"),
            _obfuscated("shit", "s|ty|ting|ter"),
            _obfuscated("bitch", "es|y|ing"),
            re.compile(r"\b(?:f\*+k?|s\*+t|a\*+hole|b\*+ch|c\*+t|d\*+k|b\*+stard)(?!\w)", re.IGNORECASE),
        )),
        CategoryTier(_M, (
            "what the f", "effing", "shut the f up", "shut up", "go to hell", "crap", "piss",
            "idiot", "stupid", "dumb", "moron", "freak", "wtf", "stfu", "lmfao",
        )),
        CategoryTier(_L, ("heck", "darn", "gosh", "fudge", "dang", "freaking", "hella")),
    ),
)

ALCOHOL_TOBACCO = CategoryDefinition(
    name="alcohol_tobacco",
    label="Alcohol and tobacco",
    tiers=(
        CategoryTier(_H, (
            "drinking to get drunk", "binge drinking", "getting wasted", "smoke to relax",
            "need a cigarette", "need a drink", "drinking game", "smoking is cool", "drunk",
            "wasted", "alcoholic", "intoxicated", "hammered", "nicotine", "vaping",
            "e-cigarette",
        )),
        CategoryTier(_M, (
            "drinking culture", "drinking habits", "smoking habit", "having a few drinks",
            "social smoking", "casual drinking", "alcohol", "beer", "wine", "cigarette",
            "tobacco", "liquor", "whiskey", "vodka", "rum", "gin", "smoking", "cigar",
        )),
        CategoryTier(_L, (
            "pub", "nightclub", "cocktail", "happy hour", "drinking", "brewery", "winery",
        )),
    ),
)

POLITICAL = CategoryDefinition(
    name="political",
    label="Political",
    tiers=(
        CategoryTier(_H, (
            "political agenda", "politically motivated", "liberal agenda", "conservative agenda",
            "socialist agenda", "fascist agenda", "corrupt politician", "voting scandal",
            "election fraud", "political scandal", "radical politics", "extremist politics",
            "political protest", "political unrest", "political violence",
        )),
        CategoryTier(_M, (
            "political views", "political stance", "political belief", "political opinion",
            "political affiliation", "political party", "politician", "democrat",
            "republican", "left-wing", "right-wing", "voter",
        )),
        CategoryTier(_L, ("congress", "senate", "legislation")),
    ),
)

RELIGION = CategoryDefinition(
    name="religion",
    label="Religion",
    tiers=(
        CategoryTier(_H, (
            "religious war", "holy war", "religious violence", "against religion",
            "anti-religion", "religious zealot", "religious fanatic", "false religion",
            "religious controversy", "religious conflict", "religious discrimination",
            "religious persecution", "blasphemy", "sacrilege", "religious extremism",
        )),
        CategoryTier(_M, (
            "religious beliefs", "religious practice", "religious leader", "religious",
            "worship", "mosque", "temple", "synagogue", "prayer", "bible", "quran", "torah",
        )),
        CategoryTier(_L, ("spiritual", "blessing", "congregation", "divine", "ritual")),
    ),
)

DEFAULT_CATEGORIES: Tuple[CategoryDefinition, ...] = (
    SEXUAL_CONTENT,
    VIOLENCE,
    HATE_SPEECH,
    HARASSMENT,
    SELF_HARM,
    ILLEGAL_ACTIVITIES,
    PROFANITY,
    ALCOHOL_TOBACCO,
    POLITICAL,
    RELIGION,
)

DEFAULT_CATEGORY_NAMES: Tuple[str, ...] = tuple(c.name for c in DEFAULT_CATEGORIES)
