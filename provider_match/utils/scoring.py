"""Distance calculation and provider match scoring.

Candidates are scored as a pandas DataFrame with one row per provider. The row
index is the provider's position in the roster list, so ranked rows can be
mapped back to the original ``Provider`` objects.
"""
import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..models import (
    MAX_SKILL_LEVEL,
    BookingRequest,
    MatchingOptions,
    Provider,
    ProviderMatch,
    ScoreBreakdown,
)
from .availability import is_available

logger = logging.getLogger(__name__)

EARTH_RADIUS_MILES = 3958.8
METERS_PER_MILE = 1609.34

DEFAULT_MIN_RATING = 3
DEFAULT_MIN_COMPLETED_JOBS = 10
DEFAULT_MAX_DISTANCE = 50
EXPERIENCE_SATURATION_JOBS = 100

WEIGHT_PRESETS: Dict[str, Dict[str, float]] = {
    "default": {"distance": 0.4, "rating": 0.3, "experience": 0.1, "skill_level": 0.2},
    "prioritize_rating": {"distance": 0.3, "rating": 0.5, "experience": 0.1, "skill_level": 0.1},
    "prioritize_experience": {"distance": 0.3, "rating": 0.2, "experience": 0.4, "skill_level": 0.1},
}

CANDIDATE_COLUMNS = [
    "Provider ID",
    "Provider Name",
    "Rating",
    "Completed Jobs",
    "Skill Level",
    "Max Travel Distance",
    "Latitude",
    "Longitude",
]

SCORE_COLUMNS = {
    "distance": "Distance Score",
    "rating": "Rating Score",
    "experience": "Experience Score",
    "skill_level": "Skill Score",
}


@dataclass(slots=True)
class MatchingDefaults:
    """Fallbacks applied when a ``MatchingOptions`` field is left unset."""

    min_rating: float = DEFAULT_MIN_RATING
    min_completed_jobs: int = DEFAULT_MIN_COMPLETED_JOBS
    max_distance: float = DEFAULT_MAX_DISTANCE
    experience_saturation_jobs: int = EXPERIENCE_SATURATION_JOBS

    @classmethod
    def from_config(cls) -> "MatchingDefaults":
        from .config import get_matching_config

        config = get_matching_config()
        return cls(
            min_rating=float(config["default_min_rating"]),
            min_completed_jobs=int(config["default_min_completed_jobs"]),
            max_distance=float(config["default_max_distance"]),
            experience_saturation_jobs=int(config["experience_saturation_jobs"]),
        )

    def effective_max_distance(self, options: MatchingOptions) -> float:
        return options.max_distance if options.max_distance is not None else self.max_distance


def distance_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in miles between two WGS84 points (Haversine).

    Scalar public helper for callers measuring a single trip or checking one
    provider. The matching pipeline uses the vectorized ``calculate_distances``
    over the whole candidate frame; both share ``EARTH_RADIUS_MILES``.
    """
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = math.sin(dlat / 2) ** 2 + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    return EARTH_RADIUS_MILES * 2 * math.asin(math.sqrt(min(1.0, a)))


def calculate_distances(user_lat: float, user_lon: float, provider_df: pd.DataFrame) -> List[Optional[float]]:
    lat_arr = np.radians(provider_df["Latitude"].to_numpy(dtype=float))
    lon_arr = np.radians(provider_df["Longitude"].to_numpy(dtype=float))
    user_lat_rad = np.radians(user_lat)
    user_lon_rad = np.radians(user_lon)

    valid = ~np.isnan(lat_arr) & ~np.isnan(lon_arr)
    dlat = lat_arr[valid] - user_lat_rad
    dlon = lon_arr[valid] - user_lon_rad
    a = np.sin(dlat / 2) ** 2 + np.cos(user_lat_rad) * np.cos(lat_arr[valid]) * np.sin(dlon / 2) ** 2
    c = 2 * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))
    distances = np.full(len(provider_df), np.nan)
    distances[valid] = EARTH_RADIUS_MILES * c

    return [None if np.isnan(d) else float(d) for d in distances]


def build_candidate_frame(
    providers: Sequence[Provider],
    request: BookingRequest,
    distances: Optional[Sequence[Optional[float]]] = None,
) -> pd.DataFrame:
    """Tabulate the roster for one request.

    ``Skill Level`` holds the level of the capability for the requested
    service (NaN when the provider does not offer it). When ``distances`` is
    omitted they are computed here from the provider coordinates; otherwise the
    supplied values (miles, one per provider) are used as-is.
    """
    rows = []
    for provider in providers:
        capability = provider.capability_for(request.service_id)
        rows.append(
            {
                "Provider ID": provider.id,
                "Provider Name": provider.name,
                "Rating": float(provider.rating),
                "Completed Jobs": provider.completed_jobs,
                "Skill Level": float(int(capability.skill_level)) if capability else np.nan,
                "Max Travel Distance": float(provider.max_travel_distance),
                "Latitude": provider.location.latitude,
                "Longitude": provider.location.longitude,
            }
        )
    df = pd.DataFrame(rows, columns=CANDIDATE_COLUMNS)

    if distances is None:
        distances = calculate_distances(request.location.latitude, request.location.longitude, df)
    elif len(distances) != len(df):
        raise ValueError(f"Expected {len(df)} precomputed distances, got {len(distances)}")

    df["Distance (Miles)"] = pd.Series(list(distances), index=df.index, dtype=float)
    return df


def filter_candidates(
    df: pd.DataFrame,
    providers: Sequence[Provider],
    request: BookingRequest,
    options: MatchingOptions,
    defaults: MatchingDefaults,
) -> pd.DataFrame:
    """Keep only rows that pass every eligibility constraint.

    Availability is checked last and only for rows that survived the cheaper
    column filters.
    """
    min_rating = options.min_rating if options.min_rating is not None else defaults.min_rating
    min_jobs = options.min_completed_jobs if options.min_completed_jobs is not None else defaults.min_completed_jobs
    max_distance = defaults.effective_max_distance(options)

    mask = pd.Series(True, index=df.index)
    excluded = set(request.excluded_providers or [])
    if excluded:
        mask &= ~df["Provider ID"].isin(excluded)

    mask &= df["Skill Level"].notna()
    if options.required_skill_level is not None:
        mask &= df["Skill Level"] >= int(options.required_skill_level)

    mask &= df["Rating"] >= min_rating
    mask &= df["Completed Jobs"] >= min_jobs

    # both radii apply; the tighter one binds
    distance = df["Distance (Miles)"]
    mask &= (distance <= df["Max Travel Distance"]) & (distance <= max_distance)

    survivors = df[mask].copy()
    start, end = request.time_slot.start_time, request.time_slot.end_time
    survivors["Available"] = pd.Series(
        [is_available(providers[i], request.date, start, end) for i in survivors.index],
        index=survivors.index,
        dtype=bool,
    )
    logger.debug(
        f"Eligibility filter: {len(df)} candidates, {len(survivors)} pass constraints, "
        f"{int(survivors['Available'].sum())} available"
    )
    return survivors[survivors["Available"]].copy()


def select_weights(options: MatchingOptions) -> Dict[str, float]:
    if options.prioritize_rating:
        preset = "prioritize_rating"
    elif options.prioritize_experience:
        preset = "prioritize_experience"
    else:
        preset = "default"
    logger.debug(f"Using '{preset}' weight preset")
    return WEIGHT_PRESETS[preset]


def score_candidates(
    df: pd.DataFrame,
    options: MatchingOptions,
    saturation_jobs: int = EXPERIENCE_SATURATION_JOBS,
) -> pd.DataFrame:
    """Add the four 0-100 sub-scores and their normalized weighted average."""
    df = df.copy()
    max_travel = df["Max Travel Distance"]
    ratio = df["Distance (Miles)"] / max_travel.where(max_travel > 0, np.nan)
    # a zero travel radius means the provider is at its own edge
    df["Distance Score"] = np.clip(100 * (1 - ratio.fillna(1.0)), 0, 100)
    df["Rating Score"] = np.clip(df["Rating"] / 5 * 100, 0, 100)
    df["Experience Score"] = np.clip(df["Completed Jobs"] / saturation_jobs, 0, 1) * 100
    df["Skill Score"] = np.clip(df["Skill Level"] / int(MAX_SKILL_LEVEL) * 100, 0, 100)

    weights = select_weights(options)
    total_weight = sum(weights.values())
    df["Score"] = sum(df[SCORE_COLUMNS[key]] * weight for key, weight in weights.items()) / total_weight
    return df


def rank_candidates(df: pd.DataFrame, preferred_ids: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """Sort by score (descending), then move preferred providers to the front.

    Both passes use a stable sort so ties keep roster order and the relative
    score order inside the preferred and non-preferred groups is preserved.
    """
    ranked = df.sort_values(by="Score", ascending=False, kind="mergesort")
    preferred = set(preferred_ids or [])
    if preferred:
        ranked = (
            ranked.assign(_not_preferred=~ranked["Provider ID"].isin(preferred))
            .sort_values(by="_not_preferred", kind="mergesort")
            .drop(columns="_not_preferred")
        )
    return ranked


def frame_to_matches(ranked: pd.DataFrame, providers: Sequence[Provider]) -> List[ProviderMatch]:
    matches = []
    for position, row in ranked.iterrows():
        matches.append(
            ProviderMatch(
                provider=providers[position],
                distance=float(row["Distance (Miles)"]),
                match_score=float(row["Score"]),
                scores=ScoreBreakdown(
                    distance=float(row["Distance Score"]),
                    rating=float(row["Rating Score"]),
                    experience=float(row["Experience Score"]),
                    skill_level=float(row["Skill Score"]),
                ),
            )
        )
    return matches


def matches_to_dataframe(matches: Sequence[ProviderMatch]) -> pd.DataFrame:
    """Tabulate ranked matches for display, one row per match in rank order."""
    columns = [
        "Rank",
        "Provider ID",
        "Provider Name",
        "Distance (Miles)",
        "Match Score",
        "Distance Score",
        "Rating Score",
        "Experience Score",
        "Skill Score",
    ]
    rows = [
        {
            "Rank": rank,
            "Provider ID": match.provider.id,
            "Provider Name": match.provider.name,
            "Distance (Miles)": round(match.distance, 2),
            "Match Score": round(match.match_score, 2),
            "Distance Score": round(match.scores.distance, 2),
            "Rating Score": round(match.scores.rating, 2),
            "Experience Score": round(match.scores.experience, 2),
            "Skill Score": round(match.scores.skill_level, 2),
        }
        for rank, match in enumerate(matches, start=1)
    ]
    return pd.DataFrame(rows, columns=columns)
