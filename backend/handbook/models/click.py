from sqlalchemy import Column, Integer, String, DateTime, Index
from ..database import Base

TITLE_MAX_LENGTH = 255
IP_MAX_LENGTH = 45
USER_AGENT_MAX_LENGTH = 500


class PolicyCardClick(Base):
    """Single click on a policy card"""
    __tablename__ = "policy_card_clicks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    policy_id = Column(Integer, nullable=False)  # Content node id, not enforced
    policy_title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    clicked_at = Column(DateTime, nullable=False)  # UTC
    ip_address = Column(String(IP_MAX_LENGTH), nullable=True)  # IPv4 or IPv6
    user_agent = Column(String(USER_AGENT_MAX_LENGTH), nullable=True)

    __table_args__ = (
        Index('ix_policy_card_clicks_policy_id', 'policy_id'),
        Index('ix_policy_card_clicks_clicked_at', 'clicked_at'),
    )

    def __repr__(self):
        return f"<PolicyCardClick {self.id} for policy {self.policy_id}>"


class PolicyCardClickCount(Base):
    """Aggregated click count per policy"""
    __tablename__ = "policy_card_click_counts"

    policy_id = Column(Integer, primary_key=True, autoincrement=False)
    policy_title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    click_count = Column(Integer, nullable=False, default=0)
    first_clicked = Column(DateTime, nullable=False)
    last_clicked = Column(DateTime, nullable=False)

    # Sorting by popularity
    __table_args__ = (
        Index('ix_policy_card_click_counts_click_count', click_count.desc()),
    )

    def __repr__(self):
        return f"<PolicyCardClickCount {self.policy_id}: {self.click_count}>"
