from recibos.schemas.receipt import (  # noqa: F401
    IssueResponse,
    PixRequest,
    PixResponse,
    QrCodePayload,
    ReceiptData,
    ReceiptInput,
    ReceiptRecord,
    VerifiedReceipt,
    VerifyResponse,
)
