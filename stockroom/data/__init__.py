"""
Data layer: SQLAlchemy models only. Rules that mutate these rows live in
stockroom.business.
"""
