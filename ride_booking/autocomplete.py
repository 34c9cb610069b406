# ride_booking/autocomplete.py
import locale
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from .config import Settings
from .http_client import HttpClient


class PlacesAutocompleteError(RuntimeError):
    pass


@dataclass(frozen=True)
class AutocompleteQuery:
    text: str
    language_code: str
    region_code: str
    included_regions: FrozenSet[str] = field(default_factory=frozenset)

    def to_body(self) -> Dict:
        return {
            "input": self.text,
            "languageCode": self.language_code,
            "regionCode": self.region_code,
            "includedRegionCodes": sorted(self.included_regions),
        }


@dataclass(frozen=True)
class Prediction:
    """One placePrediction as returned by the autocomplete endpoint."""
    place_id: str
    main_text: str
    secondary_text: str


@dataclass(frozen=True)
class LocalizedPlace:
    display_name: str       # shown to the user, in their language
    database_name: str      # stored by the backend, always English
    place_id: Optional[str] = None


@dataclass(frozen=True)
class Suggestion:
    place_id: str
    main_text: str
    secondary_text: str
    main_text_localized: str
    secondary_text_localized: str

    @property
    def full_text(self) -> str:
        return _join_text(self.main_text_localized, self.secondary_text_localized)

    @property
    def full_text_english(self) -> str:
        return _join_text(self.main_text, self.secondary_text)

    def as_localized_place(self) -> LocalizedPlace:
        return LocalizedPlace(
            display_name=self.full_text,
            database_name=self.full_text_english,
            place_id=self.place_id,
        )


def _join_text(main: str, secondary: str) -> str:
    return f"{main}, {secondary}" if secondary else main


def current_language_code(default: str = "en") -> str:
    """Language part of the process locale, e.g. 'de' for de_CH.UTF-8."""
    name = locale.getlocale()[0]
    if not name or name in ("C", "POSIX"):
        return default
    return name.replace("-", "_").split("_")[0].lower() or default


def _text_of(node) -> Optional[str]:
    if isinstance(node, dict) and isinstance(node.get("text"), str):
        return node["text"]
    return None


def parse_predictions(data) -> List[Prediction]:
    """
    Extracts place predictions from a places:autocomplete response body.
    Query predictions are skipped; an empty body means no results.
    """
    if not isinstance(data, dict):
        raise PlacesAutocompleteError(f"Autocomplete response is not an object: {type(data).__name__}")

    items = data.get("suggestions") or []
    if not isinstance(items, list):
        raise PlacesAutocompleteError(f"Autocomplete suggestions is not a list: {type(items).__name__}")

    out: List[Prediction] = []
    for item in items:
        pred = item.get("placePrediction") if isinstance(item, dict) else None
        if pred is None:
            continue
        if not isinstance(pred, dict):
            raise PlacesAutocompleteError("Malformed placePrediction entry")

        pid = pred.get("placeId")
        fmt = pred.get("structuredFormat") or {}
        main = _text_of(fmt.get("mainText")) if isinstance(fmt, dict) else None
        if not isinstance(pid, str) or not pid or main is None:
            raise PlacesAutocompleteError(f"Autocomplete prediction missing placeId or mainText: {pred!r}")

        secondary = _text_of(fmt.get("secondaryText")) or ""
        out.append(Prediction(place_id=pid, main_text=main, secondary_text=secondary))
    return out


def fetch_predictions(client: HttpClient, settings: Settings, query: AutocompleteQuery) -> List[Prediction]:
    headers = {"X-Goog-Api-Key": settings.api_key}
    data = client.post_json(settings.autocomplete_url, query.to_body(), headers=headers)
    return parse_predictions(data)


def join_suggestions(localized: List[Prediction], english: List[Prediction]) -> List[Suggestion]:
    """
    Pairs each localized prediction with its English counterpart by place id.
    Localized order is kept; predictions without an English twin are dropped.
    """
    english_by_id: Dict[str, Tuple[str, str]] = {}
    for p in english:
        english_by_id.setdefault(p.place_id, (p.main_text, p.secondary_text))

    seen: Set[str] = set()
    out: List[Suggestion] = []
    for p in localized:
        if p.place_id in seen or p.place_id not in english_by_id:
            continue
        seen.add(p.place_id)
        main_en, secondary_en = english_by_id[p.place_id]
        out.append(Suggestion(
            place_id=p.place_id,
            main_text=main_en,
            secondary_text=secondary_en,
            main_text_localized=p.main_text,
            secondary_text_localized=p.secondary_text,
        ))
    return out


def get_place_details(client: HttpClient, settings: Settings, place_id: str, language_code: str) -> Dict:
    """Fetch display name + formatted address for a selected suggestion."""
    headers = {
        "X-Goog-Api-Key": settings.api_key,
        "X-Goog-FieldMask": "id,displayName,formattedAddress",
    }
    url = f"{settings.place_details_url}/{place_id}"
    data = client.get_json(url, params={"languageCode": language_code}, headers=headers)
    if not isinstance(data, dict):
        raise PlacesAutocompleteError(f"Place Details error for {place_id}: unexpected body")
    return {
        "place_id": data.get("id") or place_id,
        "display_name": _text_of(data.get("displayName")),
        "formatted_address": data.get("formattedAddress"),
    }
