# chatplugins

Self-contained building blocks for chat-bot plugins. Each module covers one
feature. It parses the incoming command text, does the work, and returns the
text, URLs or images that your bot then sends. No module depends on a
particular chat framework.

## Installation

```
pip install .
```

To run the tests, install the `test` extra as well (`pip install .[test]`).
Then run `pytest`.

## Modules

- `chatplugins.emojimix` finds the Emoji Kitchen picture for a pair of emoji
  or QQ faces.
  - `face_to_emoji` and `match_message` recognise the pair.
  - `mix_urls` builds both candidate URLs.
  - `find_mix` returns the first URL that answers 200 to a HEAD request.
- `chatplugins.event` covers friend requests and group invitations.
  - `AutoApprove` holds the auto-approval switches. It converts to and from an
    integer with `from_int` and `to_int`, and has `should_approve` and
    `apply_toggle`.
  - `base16384_encode` and `base16384_decode` are a base16384 codec.
  - `encode_flag` and `decode_flag` turn request flags into four CJK
    characters and back.
  - `parse_decision` and `parse_toggle` parse the owner's commands.
  - `format_group_invite` and `format_friend_request` build the report
    messages.
- `chatplugins.epidemic` handles city epidemic figures.
  - `Area` is the region tree.
  - `find_city` searches it.
  - `parse_response` and `query_epidemic` read the news feed.
  - `format_report` writes the reply.
- `chatplugins.font` renders text to a base64 PNG.
  - `parse_command` reads the command.
  - `resolve_font` maps a font choice to a file in a folder you give it.
  - `render_to_base64` draws the text. With no font path it uses Pillow's
    default font.
- `chatplugins.fortune` draws the daily fortune slip.
  - `background_index` and `background_for_setting` cover the background
    choice.
  - `daily_index` gives a per-user choice that stays the same all day.
  - `random_image` picks a background from a zip archive.
  - `text_positions` lays out the vertical text.
  - `draw` paints the slip and writes a PNG.
  - `cache_name` names the cached picture.
- `chatplugins.funny` handles jokes.
  - `JokeStore` is a SQLite table of jokes.
  - `tell_joke` picks a joke at random and fills in `%name`.
- `chatplugins.github` searches repositories.
  - `parse_command` reads the command.
  - `search_repo` returns the best match.
  - `format_repo` writes the text summary.
  - `opengraph_url` gives the preview picture.
  - `net_get` fails with `HTTPStatusError` on any status other than 200.
- `chatplugins.genshin` is a ten-pull gacha simulator over a zip of card art.
  - `GachaArchive` reads the zip.
  - `Gacha.draw` draws cards with the pool's odds.
  - `Gacha.render` composes the result picture.
  - `summary` names the five-star results.
  - `is_five_star_mode` and `set_mode` read and write the pool setting bit.
- `chatplugins.heisi` decodes pictures packed as 10-byte records.
  - `decode_item` turns one record into its URL.
  - `split_items` cuts the packed data into records.
  - `Gallery` loads the per-category `.bin` files from a folder and picks one
    at random.
- `chatplugins.musiclib` manages the local song library.
  - `Config` is the JSON settings file.
  - `get_lists`, `set_music_path`, `add_default_list` and `delete_playlist`
    manage the library and its playlists.
  - `music_lottery` and `local_music` pick a song. `music_lottery` can take an
    optional downloader callable.
  - `parse_ovooa` reads a random-song API answer.
  - `cut_music` cuts ten-second clips. It runs `ffmpeg`, which must be on the
    `PATH`.
- `chatplugins.guessgame` holds the rules of one round of the song guessing
  game.
  - `is_music_file` and `parse_music_name` read song file names.
  - `SongInfo` holds the parsed name.
  - `GuessGame.guess` and `GuessGame.timeout_clip` return an `Outcome` or the
    next clip.
- `chatplugins.hearthstone` searches Hearthstone cards.
  - `search_cards` runs a search.
  - `deck_image` fetches a deck picture.
  - `card_image` downloads a card picture into a cache folder.
  - `extract_hash`, `search_url`, `deck_url` and `find_deck_code` are the
    helpers.
- `chatplugins.hyaku` gives the Ogura Hyakunin Isshu poems.
  - `load_poems` parses the collection's CSV into `Poem` objects.
  - `parse_request` reads the request.
  - `image_names` gives the picture file names.
- `chatplugins.imagefinder` searches illustrations by keyword.
  - `search_illusts` and `parse_result` run the search and read the answer.
  - `format_illust`, `format_tags` and `clean_description` build the caption.
- `chatplugins.inject` serves the owner's `run` command. `parse_run` and
  `unescape_cq` return the unescaped CQ-code text to send.
- `chatplugins.jandan` collects pictures from a picture board.
  - `PictureStore` is a SQLite store.
  - `crc64_iso` and `picture_id` compute the ids, which are CRC-64/ISO
    checksums.
  - `parse_page` reads a board page.
  - `update` walks back through older pages until it meets a picture already
    stored.

## Example

```python
from chatplugins.emojimix import match_message, mix_urls

pair = match_message([], "😀🐱")
if pair:
    print(mix_urls(*pair))
```

## What the package does not do

- It does not connect to any chat service.
- It has no command-line program.
- It does not dispatch messages to handlers. Your bot routes messages to these
  functions and sends what they return.
- It does not save per-group or per-user settings. For example, you must store
  `AutoApprove.to_int()` or the fortune background value yourself. The
  exception is `musiclib.Config`, which reads and writes its own JSON file.
- It ships no data files. You supply the fonts, the fortune backgrounds and
  slip texts, the joke database, the gacha zip, the packed `.bin` picture
  files and the poem CSV and pictures.
- It does not download songs from an online service. `music_lottery` only
  calls a downloader when you pass it one.