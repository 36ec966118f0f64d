from datetime import datetime, timedelta
from typing import Tuple
from study_core.utils import round_half_up

MIN_EASE_FACTOR = 1.3
INITIAL_EASE_FACTOR = 2.5
PASSING_QUALITY = 3

class SM2Algorithm:
    """
    SM-2 spaced repetition algorithm for calculating review intervals.
    Based on SuperMemo 2 algorithm by Piotr Wozniak.
    """

    @staticmethod
    def calculate_next_review(
        easiness_factor: float,
        interval: int,
        repetitions: int,
        quality: int,
        reference_time: datetime
    ) -> Tuple[float, int, int, datetime]:
        """
        Calculate next review time and update SM-2 parameters.

        Args:
            easiness_factor: Current EF, never below 1.3
            interval: Current interval in days
            repetitions: Consecutive successful reviews so far
            quality: Response quality (0-5). 0-2 = failed recall, 3-5 = passed
            reference_time: The moment the review happened

        Returns:
            (new_ef, new_interval, new_repetitions, next_review_time)
        """
        # Update easiness factor based on quality
        new_ef = easiness_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))

        # Ensure EF stays within bounds
        if new_ef < MIN_EASE_FACTOR:
            new_ef = MIN_EASE_FACTOR

        # If quality < 3, reset repetitions (failed recall)
        if quality < PASSING_QUALITY:
            new_repetitions = 0
            new_interval = 1
        else:
            new_repetitions = repetitions + 1

            # Branch on the count before this review
            if repetitions == 0:
                new_interval = 1
            elif repetitions == 1:
                new_interval = 6
            else:
                new_interval = round_half_up(interval * new_ef)

        next_review_time = reference_time + timedelta(days=new_interval)

        return new_ef, new_interval, new_repetitions, next_review_time

    @staticmethod
    def is_due_for_review(next_review_time: datetime, now: datetime) -> bool:
        """Check if a card is due for review"""
        return next_review_time <= now

    @staticmethod
    def get_days_overdue(next_review_time: datetime, now: datetime) -> int:
        """Calculate how many whole days overdue a review is"""
        if now < next_review_time:
            return 0
        return (now - next_review_time).days
