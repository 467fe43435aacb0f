import random


def select_reviewers(candidates, count: int, rng: random.Random) -> list:
    """
    Случайным образом выбирает до count ревьюверов без повторений

    Args:
        candidates: ID подходящих кандидатов (уже отфильтрованы)
        count: Желаемое количество ревьюверов
        rng: Источник случайности

    Returns:
        list: min(count, len(candidates)) ID, пустой список если выбирать не из кого
    """
    pool = list(candidates)
    reviewers_count = min(count, len(pool))
    if reviewers_count <= 0:
        return []

    return rng.sample(pool, reviewers_count)
