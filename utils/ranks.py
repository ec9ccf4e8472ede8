from collections import namedtuple

Rank = namedtuple("Rank", ["id", "name", "min_points", "max_points", "description"])

RANKS = [
    Rank("seedling", "Seedling", 0, 999, "Just starting your learning journey"),
    Rank("sprout", "Sprout", 1000, 2499, "Growing your knowledge foundation"),
    Rank("scholar", "Scholar", 2500, 4999, "Developing solid expertise"),
    Rank("researcher", "Researcher", 5000, 9999, "Deep diving into subjects"),
    Rank("graduate", "Graduate", 10000, 14999, "Advanced knowledge mastered"),
    Rank("expert", "Expert", 15000, 24999, "Exceptional mastery achieved"),
    Rank("master", "Master", 25000, 39999, "Elite level performer"),
    Rank("grandmaster", "Grandmaster", 40000, 59999, "Top-tier excellence"),
    Rank("legend", "Legend", 60000, None, "Ultimate achievement unlocked"),
]


def rank_for_points(points):
    for rank in reversed(RANKS):
        if points >= rank.min_points:
            return rank
    return RANKS[0]

def next_rank(points):
    """The tier after the current one, None at the top."""
    position = RANKS.index(rank_for_points(points))
    if position < len(RANKS) - 1:
        return RANKS[position + 1]
    return None

def progress_to_next_rank(points):
    current = rank_for_points(points)
    upcoming = next_rank(points)
    if upcoming is None:
        return 100.0
    span = upcoming.min_points - current.min_points
    return min(100.0, (points - current.min_points) / span * 100)

def points_to_next_rank(points):
    upcoming = next_rank(points)
    if upcoming is None:
        return 0
    return max(0, upcoming.min_points - points)

def rank_summary(points):
    rank = rank_for_points(points)
    upcoming = next_rank(points)
    return {
        "id": rank.id,
        "name": rank.name,
        "description": rank.description,
        "next_rank": upcoming.name if upcoming else None,
        "progress_to_next": round(progress_to_next_rank(points), 1),
        "points_to_next": points_to_next_rank(points),
    }
