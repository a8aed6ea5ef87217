from approvalgate.consensus.words import APPROVED_WORDS, DENIED_WORDS, format_accepted_words


def test_vocabulary_is_fixed():
    assert APPROVED_WORDS == ("approved", "approve", "lgtm", "yes")
    assert DENIED_WORDS == ("denied", "deny", "no")


def test_format_plain_words():
    assert format_accepted_words(DENIED_WORDS) == '"denied", "deny", "no"'


def test_format_single_deployment_name_is_not_suffixed():
    assert format_accepted_words(["yes"], ["blue"]) == '"yes"'


def test_format_multiple_deployment_names():
    assert format_accepted_words(["approve", "lgtm"], ["blue", "green"]) == (
        '"approve[blue,green]", "lgtm[blue,green]"'
    )
