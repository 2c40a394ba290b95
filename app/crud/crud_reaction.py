# app/crud/crud_reaction.py
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.reaction import Reaction, ReactionType


def get_user_reaction(db: Session, user_id: int, post_id: int) -> Optional[Reaction]:
    return db.query(Reaction).filter(
        Reaction.post_id == post_id,
        Reaction.user_id == user_id
    ).first()

def get_post_reactions(db: Session, post_id: int) -> List[Reaction]:
    return db.query(Reaction).filter(Reaction.post_id == post_id).all()

def create_reaction(db: Session, user_id: int, post_id: int, reaction_type: ReactionType) -> Reaction:
    db_reaction = Reaction(user_id=user_id, post_id=post_id, type=reaction_type)
    db.add(db_reaction)
    db.flush()
    return db_reaction

def update_reaction_type(db: Session, reaction: Reaction, reaction_type: ReactionType) -> Reaction:
    reaction.type = reaction_type
    db.flush()
    return reaction

def delete_reaction(db: Session, reaction: Reaction) -> None:
    db.delete(reaction)
    db.flush()
