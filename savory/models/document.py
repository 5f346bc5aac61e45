# savory/models/document.py
from savory.extensions import db


class StoredDocument(db.Model):
    """One JSON document of the key-value store (recipes, reviews, library:<user>, ...)"""
    __tablename__ = 'documents'

    key = db.Column(db.String(255), primary_key=True)
    body = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=db.func.current_timestamp(),
                           onupdate=db.func.current_timestamp())
