from typing import List, Optional
from loguru import logger
from study_core.schemas import LearningState, ReviewCard
from study_core.sm2 import SM2Algorithm, INITIAL_EASE_FACTOR
from study_core.utils import Clock, IdFactory


class ReviewScheduler:
    """
    Keeps one SM-2 review card per question and schedules the next review
    from the quality ratings given in a review session.
    """

    def __init__(self, state: LearningState, clock: Clock, id_factory: IdFactory):
        self.state = state
        self.clock = clock
        self.id_factory = id_factory

    def add_review_card(self, question_id: str, chapter_id: str) -> ReviewCard:
        """Create a fresh card that is due immediately, replacing any card for the same question"""
        card = ReviewCard(
            id=self.id_factory("review"),
            question_id=question_id,
            chapter_id=chapter_id,
            ease_factor=INITIAL_EASE_FACTOR,
            interval=0,
            repetitions=0,
            next_review_date=self.clock(),
            last_review_date=None,
            last_quality=None
        )

        self.state.review_cards = [
            c for c in self.state.review_cards if c.question_id != question_id
        ]
        self.state.review_cards.append(card)

        logger.debug(f"Added review card {card.id} for question {question_id}")
        return card

    def update_review_card(self, card_id: str, quality: int) -> Optional[ReviewCard]:
        """
        Apply a quality rating to a card.

        Args:
            card_id: Card to update; unknown ids are ignored
            quality: 0-5 rating from the review session

        Returns:
            The updated card, or None if no card has that id
        """
        card = self.get_card(card_id)
        if card is None:
            logger.warning(f"Ignoring rating for unknown review card {card_id}")
            return None

        now = self.clock()
        new_ef, new_interval, new_reps, next_review = SM2Algorithm.calculate_next_review(
            card.ease_factor,
            card.interval,
            card.repetitions,
            quality,
            reference_time=now
        )
        card.ease_factor = new_ef
        card.interval = new_interval
        card.repetitions = new_reps
        card.next_review_date = next_review
        card.last_review_date = now
        card.last_quality = quality

        logger.debug(
            f"Card {card_id} rated {quality}: interval={new_interval}d, "
            f"ease={new_ef:.2f}, repetitions={new_reps}"
        )
        return card

    def get_due_review_cards(self) -> List[ReviewCard]:
        """All cards due now, earliest first"""
        now = self.clock()
        due = [
            card for card in self.state.review_cards
            if SM2Algorithm.is_due_for_review(card.next_review_date, now)
        ]
        return sorted(due, key=lambda card: card.next_review_date)

    def get_card(self, card_id: str) -> Optional[ReviewCard]:
        for card in self.state.review_cards:
            if card.id == card_id:
                return card
        return None
