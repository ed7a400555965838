from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

from models.goal import Goal
