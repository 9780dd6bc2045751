from metabolic_health.schemas.base import CamelModel


class DashboardStats(CamelModel):
    symptoms_today: int
    adherence_rate: str  # e.g. "85%"
    content_viewed: int
