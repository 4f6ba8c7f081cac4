#
# Table definitions, only used to create the tables (DB.create_all()).
# The DAOs query the tables with plain sql, the names are lowercase so
# the unquoted uppercase names in the sql are folded to the same names.
#
from .db import DB

db = DB


class Dough(db.Model):
    """
    description: Dough recipe
    """

    __tablename__ = "doughs"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    grams_flour = db.Column(db.Integer, nullable=False)
    grams_water = db.Column(db.Integer, nullable=False)
    flour_type = db.Column(db.String(255), nullable=False)
    water_temp = db.Column(db.Integer, nullable=False)
    grams_yeast = db.Column(db.Integer, nullable=False)
    grams_salt = db.Column(db.Integer, nullable=False)
    grams_sugar = db.Column(db.Integer, nullable=False)
    grams_olive_oil = db.Column(db.Integer, nullable=False)
    bulk_ferment_time = db.Column(db.Integer, nullable=False)
    proof_time = db.Column(db.Integer, nullable=False)
    special_instructions = db.Column(db.Text)


class Ingredient(db.Model):
    """
    description: Pizza ingredient, eg. a topping or a sauce
    """

    __tablename__ = "ingredients"

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    notes = db.Column(db.Text)


class Pizza(db.Model):
    """
    description: Pizza recipe
    """

    __tablename__ = "pizzas"

    id = db.Column(db.Integer, primary_key=True)
    dough_id = db.Column(db.Integer, db.ForeignKey("doughs.id"))
    name = db.Column(db.String(255), nullable=False)
    bake_time = db.Column(db.Integer, nullable=False)
    oven_temp = db.Column(db.Integer, nullable=False)
    special_instructions = db.Column(db.Text)


class PizzaIngredient(db.Model):
    __tablename__ = "pizza_ingredients"

    pizza_id = db.Column(db.Integer, db.ForeignKey("pizzas.id"), primary_key=True)
    ingredient_id = db.Column(db.Integer, db.ForeignKey("ingredients.id"), primary_key=True)
