"""Direct message API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.models.message import Message
from app.models.user import User
from app.schemas.activity import MessageCreate, MessageOut, UnreadMessagesResponse

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
def send_message(
    message_data: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if message_data.recipient_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot send a message to yourself",
        )
    recipient = db.query(User).filter(User.id == message_data.recipient_id, User.is_active == 1).first()
    if not recipient:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipient not found")

    message = Message(
        sender_id=current_user.id,
        recipient_id=recipient.id,
        content=message_data.content,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


@router.get("/unread-count", response_model=UnreadMessagesResponse)
def get_unread_messages(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    count = db.query(Message).filter(
        Message.recipient_id == current_user.id,
        Message.read == 0,
    ).count()
    return UnreadMessagesResponse(count=count)


@router.get("/conversation/{other_user_id}", response_model=list[MessageOut])
def get_conversation(
    other_user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Messages exchanged with another account, oldest first."""
    return (
        db.query(Message)
        .filter(
            or_(
                and_(Message.sender_id == current_user.id, Message.recipient_id == other_user_id),
                and_(Message.sender_id == other_user_id, Message.recipient_id == current_user.id),
            )
        )
        .order_by(Message.sent_at, Message.id)
        .all()
    )


@router.put("/{message_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_message_read(
    message_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Only the recipient can mark a message read."""
    message = db.query(Message).filter(Message.id == message_id).first()
    if not message or message.recipient_id != current_user.id:
        raise HTTPException(status_code=404, detail="Message not found")
    if not message.read:
        message.read = 1
        db.commit()
