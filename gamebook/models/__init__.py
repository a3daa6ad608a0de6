from .documents import CRTDoc, CRTRow, ChoiceDoc, EnemyDoc, NodeDoc, OutcomeDoc, PlayerDoc, StoryDoc

__all__ = ["CRTDoc", "CRTRow", "ChoiceDoc", "EnemyDoc", "NodeDoc", "OutcomeDoc", "PlayerDoc", "StoryDoc"]
