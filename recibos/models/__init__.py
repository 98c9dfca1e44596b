from recibos.models.receipt import ReceiptModel  # noqa: F401
