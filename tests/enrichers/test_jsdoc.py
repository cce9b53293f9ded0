from entitytraverse.enrichers.jsdoc import extract_jsdoc, find_jsdoc_block, parse_jsdoc

SOURCE = """\
import x from 'y';

/**
 * Fetches a user.
 *
 * Retries once on network failure.
 * @param {string} id the user id
 * @param {number} [retries=1] - how often to retry
 * @returns {Promise<User>} the user
 * @throws {NotFoundError} when missing
 * @example
 * await fetchUser('42')
 * @deprecated use loadUser
 * @since 2.1
 * @service
 */

export async function fetchUser(id, retries) {}

// plain comment
function other() {}
"""


def test_block_must_sit_directly_above():
    assert find_jsdoc_block(SOURCE, 18).startswith("/**")
    assert find_jsdoc_block(SOURCE, 21) is None
    assert find_jsdoc_block(SOURCE, 1) is None


def test_parsed_fields():
    doc = extract_jsdoc(SOURCE, 18)
    assert doc["summary"] == "Fetches a user."
    assert "Retries once" in doc["description"]
    assert doc["params"][0] == {"name": "id", "type": "string", "description": "the user id",
                                "optional": False, "default": None}
    assert doc["params"][1]["optional"] is True
    assert doc["params"][1]["default"] == "1"
    assert doc["params"][1]["description"] == "how often to retry"
    assert doc["returns"] == {"type": "Promise<User>", "description": "the user"}
    assert doc["throws"] == [{"type": "NotFoundError", "description": "when missing"}]
    assert doc["examples"] == ["await fetchUser('42')"]
    assert doc["deprecated"] == "use loadUser"
    assert doc["since"] == "2.1"
    assert [t["tag"] for t in doc["tags"]] == ["service"]
    assert doc["is_async"] is False


def test_single_line_block():
    doc = parse_jsdoc("/** @hook */")
    assert doc["description"] == ""
    assert doc["tags"][0]["tag"] == "hook"


def test_empty_block():
    assert parse_jsdoc("/** */") is None


def test_plain_block_comment_is_not_documentation():
    source = "/** Doc for a */\nfunction a() {}\n/* plain */\nfunction b() {}\n"
    assert find_jsdoc_block(source, 2) == "/** Doc for a */"
    assert find_jsdoc_block(source, 4) is None


def test_scan_stops_at_code():
    source = "/**\n * Doc for a\n */\nfunction a() {}\n   done */\nfunction b() {}\n"
    assert find_jsdoc_block(source, 6) is None


def test_line_past_the_end_of_the_source():
    assert find_jsdoc_block("/** doc */\nconst a = 1;", 40) is None
    assert extract_jsdoc("", 3) is None
