"""Erasmus Journey — Content Search.

Case-insensitive substring search across published destinations,
accommodation experiences and university exchanges, ranked by a simple
term-frequency relevance score.
"""

from typing import Dict, List, Literal, Optional

from erasmus_journey.analyzer.extractors import extract
from erasmus_journey.models.aggregation_models import SearchResult
from erasmus_journey.models.extraction_models import AccommodationFacts
from erasmus_journey.models.submission_models import SubmissionType, parse_location
from erasmus_journey.repositories.base import DestinationRepository, SubmissionRepository
from erasmus_journey.services.presentation import to_list_item
from erasmus_journey.core.logging import get_logger

logger = get_logger("services.search")

SearchType = Literal["destinations", "accommodations", "exchanges", "all"]

FULL_QUERY_SCORE = 10
TERM_SCORE = 5
PREFIX_BONUS = 3

DESTINATION_POOL = 100
ACCOMMODATION_POOL = 50
EXCHANGE_POOL = 50


def calculate_relevance(query: str, content: str) -> int:
    """Score ``content`` for ``query``.

    Each query term found in the content adds 10 when the whole query is a
    substring of the content and 5 otherwise, plus 3 if the content starts
    with that term.
    """
    query_lower = query.lower().strip()
    content_lower = content.lower()
    full_match = query_lower in content_lower

    score = 0
    for term in query_lower.split():
        if term in content_lower:
            score += FULL_QUERY_SCORE if full_match else TERM_SCORE
            if content_lower.startswith(term):
                score += PREFIX_BONUS
    return score


def _matches(terms: List[str], fields: List[Optional[str]]) -> bool:
    haystack = [f.lower() for f in fields if f]
    return any(term in field for term in terms for field in haystack)


class SearchService:
    """Search over destinations and processed submissions."""

    def __init__(self, submissions: SubmissionRepository, destinations: DestinationRepository):
        self.submissions = submissions
        self.destinations = destinations

    def search_content(
        self,
        query: str,
        type: SearchType = "all",
        limit: int = 20,
    ) -> List[SearchResult]:
        terms = query.lower().split()
        if not terms:
            return []

        results: List[SearchResult] = []
        if type in ("destinations", "all"):
            results.extend(self._search_destinations(query, terms))
        if type in ("accommodations", "all"):
            results.extend(self._search_accommodations(query, terms))
        if type in ("exchanges", "all"):
            results.extend(self._search_exchanges(query, terms))

        results.sort(key=lambda r: r.relevance, reverse=True)
        logger.info(f"Search {query!r} ({type}): {len(results)} hits")
        return results[:limit]

    def _search_destinations(self, query: str, terms: List[str]) -> List[SearchResult]:
        hits = []
        for destination in self.destinations.list_published(limit=DESTINATION_POOL):
            item = to_list_item(destination)
            if not _matches(terms, [item.name, item.city, item.country, item.description]):
                continue
            hits.append(
                SearchResult(
                    type="destination",
                    id=item.id,
                    title=item.name,
                    subtitle=item.description,
                    relevance=calculate_relevance(query, f"{item.name} {item.description}"),
                    data=item.model_dump(mode="json"),
                )
            )
        return hits

    def accommodation_experiences(self, limit: int = ACCOMMODATION_POOL) -> List[dict]:
        """Processed accommodation submissions as flat records, newest first."""
        rows = self.submissions.find_submissions(
            types=[SubmissionType.ACCOMMODATION.value],
            processed=True,
            limit=limit,
        )
        experiences = []
        for s in rows:
            facts = extract(s)
            if not isinstance(facts, AccommodationFacts):
                continue
            experiences.append(
                {
                    "id": s.id,
                    "title": s.title,
                    "type": facts.accommodation_type,
                    "monthly_rent": facts.monthly_rent,
                    "rating": facts.accommodation_rating,
                    "location": s.location,
                    "description": facts.description,
                    "author": s.author_name or "Anonymous",
                }
            )
        return experiences

    def _search_accommodations(self, query: str, terms: List[str]) -> List[SearchResult]:
        hits = []
        for acc in self.accommodation_experiences():
            fields = [acc["title"], acc["location"], acc["type"], acc["description"]]
            if not _matches(terms, fields):
                continue
            hits.append(
                SearchResult(
                    type="accommodation",
                    id=acc["id"],
                    title=acc["title"],
                    subtitle=acc["location"] or "",
                    relevance=calculate_relevance(query, f"{acc['title']} {acc['description'] or ''}"),
                    data=acc,
                )
            )
        return hits

    def university_exchanges(self, limit: int = EXCHANGE_POOL) -> List[dict]:
        """Processed basic-info/course submissions grouped by host university."""
        rows = self.submissions.find_submissions(
            types=[SubmissionType.BASIC_INFO.value, SubmissionType.COURSE_MATCHING.value],
            processed=True,
            limit=limit * 2,
        )
        exchanges: Dict[str, dict] = {}
        for s in rows:
            facts = extract(s)
            university = getattr(facts, "host_university", None)
            if not university:
                continue
            city, country = parse_location(s.location) or (
                getattr(facts, "host_city", None),
                getattr(facts, "host_country", None),
            )
            exchange = exchanges.setdefault(
                university,
                {
                    "university": university,
                    "city": city,
                    "country": country,
                    "students": 0,
                    "departments": [],
                    "submission_ids": [],
                },
            )
            exchange["students"] += 1
            exchange["submission_ids"].append(s.id)
            department = getattr(facts, "host_department", None)
            if department and department not in exchange["departments"]:
                exchange["departments"].append(department)
        return list(exchanges.values())[:limit]

    def _search_exchanges(self, query: str, terms: List[str]) -> List[SearchResult]:
        hits = []
        for ex in self.university_exchanges():
            fields = [ex["university"], ex["city"], ex["country"], *ex["departments"]]
            if not _matches(terms, fields):
                continue
            hits.append(
                SearchResult(
                    type="exchange",
                    id=ex["university"],
                    title=ex["university"],
                    subtitle=", ".join(p for p in (ex["city"], ex["country"]) if p),
                    relevance=calculate_relevance(
                        query, f"{ex['university']} {' '.join(ex['departments'])}"
                    ),
                    data=ex,
                )
            )
        return hits
