"""Loading of the static classifier keyword tables."""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from ...exceptions import ConfigurationError

KEYWORDS_FILE = Path(__file__).parent / "keywords.yaml"

Buckets = Tuple[Tuple[str, Tuple[str, ...]], ...]

REQUIRED_SECTIONS = (
    "company_names",
    "competitors",
    "sector_keywords",
    "stock_keywords",
    "industry_keywords",
    "macro_keywords",
    "sentiment",
    "price_impact",
    "urgency_boosts",
)


def _buckets(raw: Dict[str, List[str]]) -> Buckets:
    """Ordered (bucket, lowercase keywords) pairs, preserving file order."""
    return tuple(
        (name, tuple(str(word).lower() for word in words)) for name, words in raw.items()
    )


@dataclass(frozen=True)
class KeywordTables:
    company_names: Dict[str, str]
    competitors: Dict[str, Tuple[str, ...]]
    sector_keywords: Dict[str, Tuple[str, ...]]
    stock_buckets: Buckets
    industry_buckets: Buckets
    macro_buckets: Buckets
    positive_words: Tuple[str, ...]
    negative_words: Tuple[str, ...]
    impact_tiers: Buckets
    urgency_boosts: Tuple[Tuple[float, Tuple[str, ...]], ...]

    def company_name(self, symbol: str) -> str:
        """Mapped company name, or the symbol itself when unmapped."""
        return self.company_names.get(symbol.upper(), symbol.upper())

    def competitors_of(self, symbol: str) -> Tuple[str, ...]:
        return self.competitors.get(symbol.upper(), ())

    def keywords_for_sector(self, sector: Optional[str]) -> Tuple[str, ...]:
        return self.sector_keywords.get(sector or "", ())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KeywordTables":
        missing = [section for section in REQUIRED_SECTIONS if section not in (data or {})]
        if missing:
            raise ConfigurationError("keyword_tables", f"missing sections: {', '.join(missing)}")
        return cls(
            company_names={k.upper(): str(v) for k, v in data["company_names"].items()},
            competitors={k.upper(): tuple(map(str, v)) for k, v in data["competitors"].items()},
            sector_keywords={
                k: tuple(str(word).lower() for word in v)
                for k, v in data["sector_keywords"].items()
            },
            stock_buckets=_buckets(data["stock_keywords"]),
            industry_buckets=_buckets(data["industry_keywords"]),
            macro_buckets=_buckets(data["macro_keywords"]),
            positive_words=tuple(w.lower() for w in data["sentiment"]["positive"]),
            negative_words=tuple(w.lower() for w in data["sentiment"]["negative"]),
            impact_tiers=_buckets(data["price_impact"]),
            urgency_boosts=tuple(
                (float(group["boost"]), tuple(w.lower() for w in group["words"]))
                for group in data["urgency_boosts"]
            ),
        )


@lru_cache(maxsize=1)
def load_keyword_tables() -> KeywordTables:
    """
    Load the classifier keyword tables from the packaged YAML file.

    Returns:
        Parsed KeywordTables

    Raises:
        FileNotFoundError: If the keywords file doesn't exist
        yaml.YAMLError: If the YAML file is malformed
        ConfigurationError: If a required section is missing
    """
    try:
        with open(KEYWORDS_FILE, "r", encoding="utf-8") as f:
            return KeywordTables.from_dict(yaml.safe_load(f))
    except FileNotFoundError:
        raise FileNotFoundError(f"Keyword tables file not found: {KEYWORDS_FILE}")
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Error parsing keyword tables YAML file: {e}")
