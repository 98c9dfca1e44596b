"""
Unit tests for the issuance pipeline: canonical form, fingerprint, amount in
words, sanitizer, validators, prepare/sign.
"""
import hashlib
from datetime import date

import pytest

from recibos.config import Settings
from recibos.errors import ReceiptValidationError
from recibos.pipeline import prepare_receipt, sign_receipt
from recibos.pipeline.authenticity import Fingerprinter, canonicalize, generate_receipt_hash
from recibos.pipeline.extenso import amount_in_words
from recibos.pipeline.pix import has_valid_checksum
from recibos.pipeline.sanitizer import parse_amount, sanitize_numero, sanitize_receipt_data
from recibos.pipeline.validators import (
    check_cpf_cnpj,
    check_data,
    check_telefone,
    is_valid_cnpj,
    is_valid_cpf,
    validate_receipt_data,
)
from recibos.schemas import ReceiptInput


# =====================================================================
# Canonical form
# =====================================================================
class TestCanonicalize:
    def test_field_order_and_normalization(self, receipt_data):
        parts = canonicalize(receipt_data).split("|")
        assert len(parts) == 12
        assert parts[0] == "REC-0001"
        assert parts[1] == "500.00"
        assert parts[3] == "LÍVIA MARTINEZ"
        assert parts[4] == "11144477735"
        assert parts[8] == "47200760000106"
        assert parts[10] == "48999990000"
        assert parts[11] == "financeiro@duarteurbanismo.com.br"

    def test_insensitive_to_case_whitespace_punctuation(self, receipt_data):
        variant = receipt_data.model_copy(update={
            "numero": " rec-0001 ",
            "recebido_de": "  lívia martinez",
            "cpf_cnpj": "11144477735",
            "referente": receipt_data.referente.lower() + "   ",
            "forma_pagamento": "pix",
            "telefone_emitente": "48 9 9999 0000",
            "email_emitente": " FINANCEIRO@DuarteUrbanismo.com.br ",
        })
        assert canonicalize(variant) == canonicalize(receipt_data)

    def test_idempotent(self, receipt_data):
        assert canonicalize(receipt_data) == canonicalize(receipt_data)


# =====================================================================
# Fingerprint
# =====================================================================
class TestFingerprint:
    def test_sha256_of_canonical_plus_secret(self, receipt_data, fingerprinter):
        expected = hashlib.sha256(
            (canonicalize(receipt_data) + "|test-secret").encode("utf-8")
        ).hexdigest()
        assert fingerprinter.fingerprint(receipt_data) == expected

    def test_unsalted(self, receipt_data):
        expected = hashlib.sha256(canonicalize(receipt_data).encode("utf-8")).hexdigest()
        assert generate_receipt_hash(receipt_data) == expected

    def test_deterministic_lowercase_hex(self, receipt_data, fingerprinter):
        first = fingerprinter.fingerprint(receipt_data)
        assert first == fingerprinter.fingerprint(receipt_data)
        assert len(first) == 64
        assert first == first.lower()

    @pytest.mark.parametrize("field,value", [
        ("numero", "REC-0002"),
        ("valor", 500.01),
        ("data", "2024-01-01"),
        ("recebido_de", "Outra Pessoa"),
        ("cpf_cnpj", "123.456.789-09"),
        ("referente", "Parcela 2 do lote"),
        ("forma_pagamento", "Boleto"),
        ("email_emitente", "outro@example.com"),
    ])
    def test_any_field_change_changes_hash(self, receipt_data, fingerprinter, field, value):
        changed = receipt_data.model_copy(update={field: value})
        assert fingerprinter.fingerprint(changed) != fingerprinter.fingerprint(receipt_data)

    def test_secret_changes_hash(self, receipt_data, fingerprinter):
        other = Fingerprinter(Settings(_env_file=None, HASH_SECRET="other"))
        assert other.fingerprint(receipt_data) != fingerprinter.fingerprint(receipt_data)

    def test_pix_fields_not_hashed(self, receipt_data, fingerprinter):
        with_pix = receipt_data.model_copy(update={"pix_key": "11144477735"})
        assert fingerprinter.fingerprint(with_pix) == fingerprinter.fingerprint(receipt_data)


# =====================================================================
# Amount in words
# =====================================================================
class TestAmountInWords:
    @pytest.mark.parametrize("valor,expected", [
        (0, "zero reais"),
        (1.00, "um real"),
        (2, "dois reais"),
        (0.01, "um centavo"),
        (0.5, "cinquenta centavos"),
        (15, "quinze reais"),
        (100, "cem reais"),
        (101, "cento e um reais"),
        (500, "quinhentos reais"),
        (1000, "mil reais"),
        (1050, "mil e cinquenta reais"),
        (1250.50, "mil duzentos e cinquenta reais e cinquenta centavos"),
        (20000, "vinte mil reais"),
        (1_000_000, "um milhão de reais"),
        (1_500_000, "um milhão e quinhentos mil reais"),
        (1_001_000, "um milhão e mil reais"),
        (1_250_000, "um milhão duzentos e cinquenta mil reais"),
        (2_000_050, "dois milhões e cinquenta reais"),
    ])
    def test_amounts(self, valor, expected):
        assert amount_in_words(valor) == expected


# =====================================================================
# Sanitizer
# =====================================================================
class TestSanitizer:
    def test_numero_normalized(self):
        assert sanitize_numero(" rec 0001/a ") == "REC0001A"
        assert len(sanitize_numero("X" * 40)) == 32

    def test_numero_generated_when_blank(self):
        assert sanitize_numero("", now_ms=1717171234567) == "REC-234567"
        assert sanitize_numero("***").startswith("REC-")

    @pytest.mark.parametrize("raw,expected", [
        (None, 0.0),
        (100, 100.0),
        (100.499, 100.5),
        ("1.234,50", 1234.5),
        ("R$ 20,00", 20.0),
        ("abc", None),
    ])
    def test_parse_amount(self, raw, expected):
        assert parse_amount(raw) == expected

    def test_issuer_from_settings(self, settings):
        payload = ReceiptInput.model_validate({
            "valor": "12", "emitidoPor": "Impostor", "valorExtenso": "um milhão",
            "data": "2024-05-01T10:00:00Z",
        })
        data, numeric = sanitize_receipt_data(payload, settings)
        assert numeric
        assert data.emitido_por == settings.EMISSOR_NOME
        assert data.valor_extenso == "doze reais"
        assert data.data == "2024-05-01"
        assert data.email_emitente == settings.EMPRESA_EMAIL.lower()


# =====================================================================
# Validators
# =====================================================================
class TestValidators:
    def test_cpf(self):
        assert is_valid_cpf("111.444.777-35")
        assert is_valid_cpf("123.456.789-09")
        assert not is_valid_cpf("111.444.777-36")
        assert not is_valid_cpf("111.111.111-11")

    def test_cnpj(self):
        assert is_valid_cnpj("47.200.760/0001-06")
        assert is_valid_cnpj("11.222.333/0001-81")
        assert not is_valid_cnpj("11.222.333/0001-82")
        assert not is_valid_cnpj("00000000000000")

    def test_cpf_cnpj_messages(self):
        assert check_cpf_cnpj("") == "Campo obrigatório"
        assert check_cpf_cnpj("123") == "CPF deve ter 11 dígitos ou CNPJ 14 dígitos"
        assert check_cpf_cnpj("111.444.777-36") == "CPF inválido"
        assert check_cpf_cnpj("11.222.333/0001-82") == "CNPJ inválido"

    def test_telefone(self):
        assert check_telefone("(48) 3333-0000") is None
        assert check_telefone("123") == "Telefone deve ter 10 ou 11 dígitos"

    def test_data_window(self):
        today = date(2024, 6, 1)
        assert check_data("2024-06-01", today) is None
        assert check_data("2026-01-01", today) == "Data não pode ser mais de 1 ano no futuro"
        assert check_data("2010-01-01", today) == "Data muito antiga"
        assert check_data("01/06/2024", today) == "Data inválida"
        assert check_data("", today) == "Data obrigatória"

    def test_valid_receipt(self, receipt_data):
        assert validate_receipt_data(receipt_data) == []

    def test_collects_every_error(self, receipt_data):
        broken = receipt_data.model_copy(update={
            "valor": 0.0, "cpf_cnpj": "123", "referente": "curto", "data": "",
        })
        errors = validate_receipt_data(broken)
        assert "Valor deve ser maior que zero" in errors
        assert "CPF deve ter 11 dígitos ou CNPJ 14 dígitos" in errors
        assert "Referente a deve ter pelo menos 10 caracteres" in errors
        assert "Data obrigatória" in errors
        assert len(errors) == 4

    def test_non_numeric_amount(self, receipt_data):
        errors = validate_receipt_data(receipt_data, amount_is_numeric=False)
        assert errors == ["Valor deve ser numérico"]


# =====================================================================
# prepare / sign
# =====================================================================
class TestPipeline:
    def test_prepare_valid(self, receipt_payload, settings):
        data = prepare_receipt(ReceiptInput.model_validate(receipt_payload), settings)
        assert data.numero == "REC-0001"
        assert data.valor_extenso == "quinhentos reais"
        assert data.pix_payload is None

    def test_prepare_invalid_raises_with_list(self, settings):
        with pytest.raises(ReceiptValidationError) as exc_info:
            prepare_receipt(ReceiptInput.model_validate({"valor": "abc"}), settings)
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert "Valor deve ser numérico" in exc_info.value.errors
        assert len(exc_info.value.errors) > 1

    def test_prepare_builds_pix_payload(self, receipt_payload, settings):
        payload = ReceiptInput.model_validate({**receipt_payload, "pixKey": settings.DEFAULT_PIX_KEY})
        data = prepare_receipt(payload, settings)
        assert data.pix_payload
        assert has_valid_checksum(data.pix_payload)
        assert "5406500.00" in data.pix_payload

    def test_sign(self, receipt_data, fingerprinter):
        signed = sign_receipt(receipt_data, fingerprinter, "https://x.test/", share_id="abc")
        assert signed.hash == fingerprinter.fingerprint(receipt_data)
        qr = signed.qr_payload
        assert qr.verify_url == f"https://x.test/api/recibos/REC-0001?hash={signed.hash}"
        assert qr.share_url == "https://x.test/recibos/share/abc"
        assert qr.emitente == receipt_data.emitido_por

    def test_sign_without_share_id(self, receipt_data, fingerprinter):
        signed = sign_receipt(receipt_data, fingerprinter, "https://x.test")
        assert signed.qr_payload.share_url is None
