from tortoise import fields, models

class Hoax(models.Model):
    id = fields.IntField(pk=True)
    content = fields.TextField()
    timestamp = fields.BigIntField()  # Epoch milliseconds at submission
    user = fields.ForeignKeyField(
        "models.User",
        related_name="hoaxes",
        on_delete=fields.CASCADE,
    )

    class Meta:
        table = "hoaxes"
