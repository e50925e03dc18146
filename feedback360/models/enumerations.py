from enum import Enum


class Relationship(str, Enum):
    SENIOR = "senior"          # Reviewer sits above the employee
    PEER = "peer"              # Equal colleague
    JUNIOR = "junior"          # Reviewer reports to / sits below the employee
    AGGREGATE = "aggregate"    # Cross-relationship composite, never a reviewer


class ConfidenceLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AdjustmentType(str, Enum):
    NONE = "none"
    MODERATE = "moderate"
    EXTREME = "extreme"


class Competency(str, Enum):
    TECHNICAL = "Technical/Functional Expertise"
    LEADERSHIP = "Leadership & Influence"
    COLLABORATION = "Collaboration & Communication"
    INNOVATION = "Innovation & Problem-Solving"
    EXECUTION = "Execution & Accountability"
    EMOTIONAL_INTELLIGENCE = "Emotional Intelligence & Culture Fit"
    GROWTH = "Growth & Development"


REVIEWER_RELATIONSHIPS = (Relationship.SENIOR, Relationship.PEER, Relationship.JUNIOR)

COMPETENCY_ORDER = [c.value for c in Competency]
