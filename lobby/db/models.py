from sqlalchemy import (
    TIMESTAMP, Column, Float, ForeignKey, Integer, MetaData, String, Table
)

metadata = MetaData()

lobby_member = Table(
    'lobby_member', metadata,
    Column('id',            Integer,        primary_key=True),
    Column('lobby_id',      String(64),     nullable=False, index=True),
    Column('user_id',       String(64),     nullable=False, unique=True),
    Column('language',      String(32)),
    Column('join_time',     TIMESTAMP),
)

friendship = Table(
    'friendship', metadata,
    Column('user_id',       String(64),     primary_key=True),
    Column('friend_id',     String(64),     primary_key=True),
)

room = Table(
    'room', metadata,
    Column('id',            String(64),     primary_key=True),
    Column('lobby_id',      String(64),     nullable=False),
    Column('create_time',   TIMESTAMP,      nullable=False),
)

room_member = Table(
    'room_member', metadata,
    Column('room_id',       String(64),     ForeignKey('room.id'), primary_key=True),
    Column('user_id',       String(64),     primary_key=True),
    Column('happiness',     Float),
)
