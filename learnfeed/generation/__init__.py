"""Question synthesis: concepts, distractors and answer shuffling."""

from learnfeed.generation.concepts import extract_key_concepts
from learnfeed.generation.distractors import DistractorSynthesizer
from learnfeed.generation.questions import QuestionGenerator
from learnfeed.generation.shuffler import shuffle_answers

__all__ = [
    "DistractorSynthesizer",
    "QuestionGenerator",
    "extract_key_concepts",
    "shuffle_answers",
]
