import pytest

from pdf.sanitizer import MIN_COMMENT_LENGTH, clean_comment, is_informative, sanitize_comments


def test_exactly_ten_chars_dropped_eleven_kept():
    ten = "a" * MIN_COMMENT_LENGTH
    eleven = "b" * (MIN_COMMENT_LENGTH + 1)

    assert sanitize_comments([ten, eleven]) == [eleven]


@pytest.mark.parametrize("candidate", ["Muito ruim", "Excelente!", "  curto  "])
def test_short_comments_dropped(candidate):
    assert sanitize_comments([candidate]) == []


def test_length_measured_after_trim():
    assert sanitize_comments(["   Muito ruim   "]) == []
    assert sanitize_comments(["   Muito ruim!   "]) == ["Muito ruim!"]


def test_numeric_and_sentiment_labels_dropped():
    assert sanitize_comments(["12345678901234", "Promotor", "DETRACTOR", "Neutro"]) == []


def test_contact_phrase_dropped_regardless_of_length():
    assert sanitize_comments(["Cliente não autorizou contato"]) == []
    assert sanitize_comments(["Sem contato"]) == []


def test_disqualifying_substring_drops_whole_candidate():
    assert sanitize_comments(["Cliente não autorizou retorno por telefone"]) == []


def test_ticket_numbers_and_path_fragments_stripped():
    result = sanitize_comments(["#4521 Ar condicionado quebrado (/surveys/98765/answers)"])

    assert result == ["Ar condicionado quebrado"]


def test_dedupe_preserves_first_seen_order():
    a = "Atendimento excelente na recepção"
    b = "Vestiário sujo durante a tarde"

    assert sanitize_comments([a, b, a]) == [a, b]


def test_duplicates_detected_after_cleaning():
    assert sanitize_comments([
        "#1 Professor muito atencioso",
        "Professor muito atencioso",
    ]) == ["Professor muito atencioso"]


def test_idempotent():
    candidates = [
        "  Atendimento excelente na recepção ",
        "#99 Fila enorme no horário de pico (/people/12)",
        "Promotor",
        "Sem contato",
        "Atendimento excelente na recepção",
        "1234567890123",
        "Vestiário sujo #(/surveys/1)42 hoje",
    ]
    once = sanitize_comments(candidates)

    assert sanitize_comments(once) == once


def test_clean_comment_and_is_informative():
    assert clean_comment("  Não houve contato Equipamento novo na sala ") == "Equipamento novo na sala"
    assert is_informative("Equipamento novo na sala")
    assert not is_informative("Neutral")


def test_ticket_rejoined_by_path_removal_is_stripped():
    assert clean_comment("Vestiário sujo #(/surveys/1)42 hoje") == "Vestiário sujo  hoje"
    assert sanitize_comments(["Vestiário sujo #(/surveys/1)42 hoje"]) == ["Vestiário sujo  hoje"]
