"""Database models for the resources module."""

import uuid
from datetime import datetime
from typing import List
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from medprep.core.database import Base


class Resource(Base):
    """Downloadable file gated by subscription tier."""

    __tablename__ = "resources"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    file_path = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    tiers = relationship(
        "ResourceTier",
        back_populates="resource",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def allowed_tiers(self) -> List[str]:
        return sorted(tier.tier for tier in self.tiers)

    def set_allowed_tiers(self, tiers) -> None:
        """Replace the allow-list; duplicates collapse."""
        wanted = set(tiers)
        self.tiers = [t for t in self.tiers if t.tier in wanted]
        present = {t.tier for t in self.tiers}
        for tier in sorted(wanted - present):
            self.tiers.append(ResourceTier(tier=tier))


class ResourceTier(Base):
    """One entry of a resource's allowed-tier set."""

    __tablename__ = "resource_tiers"

    resource_id = Column(String, ForeignKey("resources.id", ondelete="CASCADE"), primary_key=True)
    tier = Column(String, primary_key=True, index=True)

    resource = relationship("Resource", back_populates="tiers")


class ResourceDownload(Base):
    """Append-only audit row written for each issued download URL."""

    __tablename__ = "resource_downloads"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, nullable=False, index=True)
    resource_id = Column(String, nullable=False, index=True)
    download_source = Column(String, nullable=True)
    downloaded_at = Column(DateTime, nullable=False, default=datetime.now)
