import logging

from flask import request
from sqlalchemy.exc import IntegrityError

from hotelsite import db
from hotelsite.booking import EMAIL_PATTERN, missing_fields
from hotelsite.catalog import list_hotels
from hotelsite.errors import ConflictError, ValidationError
from hotelsite.models import ContactMessage, NewsletterSubscriber
from hotelsite.routes import api, json_body, ok
from hotelsite.search import filter_by_destination

logger = logging.getLogger(__name__)


@api.route('/search', methods=['GET'])
def search_hotels():
    destination = request.args.get('destination')
    guests = request.args.get('guests')
    try:
        guests = int(guests) if guests else 1
    except ValueError:
        raise ValidationError('guests must be an integer')

    hotels = filter_by_destination(list_hotels(), destination)
    return ok({
        'hotels': hotels,
        'searchParams': {
            'destination': destination,
            'checkIn': request.args.get('checkIn'),
            'checkOut': request.args.get('checkOut'),
            'guests': guests,
        },
    })


### CONTACTO ###

def contact_to_dict(message):
    return {
        'id': message.id,
        'name': message.name,
        'email': message.email,
        'subject': message.subject,
        'message': message.message,
        'status': message.status,
        'date': message.created_at.isoformat(),
    }


@api.route('/contact', methods=['POST'])
def send_contact_message():
    data = json_body()
    missing = missing_fields(data, ('name', 'email', 'subject', 'message'))
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    if not EMAIL_PATTERN.match(str(data['email'])):
        raise ValidationError('Invalid email format')

    message = ContactMessage(
        name=str(data['name']),
        email=str(data['email']),
        subject=str(data['subject']),
        message=str(data['message']),
    )
    db.session.add(message)
    db.session.commit()
    logger.info('Contact message %s received', message.id)

    return ok(
        contact_to_dict(message),
        'Message sent successfully. We will get back to you soon!',
        201,
    )


@api.route('/contact', methods=['GET'])
def list_contact_messages():
    messages = ContactMessage.query.order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc()).all()
    return ok([contact_to_dict(message) for message in messages])


### BOLETIN ###

def subscriber_to_dict(subscriber):
    return {
        'id': subscriber.id,
        'email': subscriber.email,
        'status': subscriber.status,
        'subscribedAt': subscriber.subscribed_at.isoformat(),
    }


@api.route('/newsletter', methods=['POST'])
def subscribe():
    data = json_body()
    email = str(data.get('email') or '').strip().lower()
    if not email:
        raise ValidationError('Email is required')
    if not EMAIL_PATTERN.match(email):
        raise ValidationError('Invalid email format')

    if NewsletterSubscriber.query.filter_by(email=email).first():
        raise ConflictError('Email already subscribed')

    subscriber = NewsletterSubscriber(email=email)
    db.session.add(subscriber)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError('Email already subscribed')

    return ok(subscriber_to_dict(subscriber), 'Successfully subscribed to newsletter!', 201)


@api.route('/newsletter', methods=['GET'])
def list_subscribers():
    subscribers = NewsletterSubscriber.query.order_by(NewsletterSubscriber.subscribed_at.desc()).all()
    return ok([subscriber_to_dict(subscriber) for subscriber in subscribers])
