"""Sample documents and note files shared by the tests."""

PAPER_ID = "/docs/paper.pdf"

PAPER_PAGES = [
    "Page one: abstract and motivation.",
    "Page two: the method, explained at length.",
    "Page three: a figure of the pipeline.",
    "Page four: results and a results table.",
    "Page five: references.",
]

PAPER_NOTES = """\
#+TITLE: Reading notes
* paper.pdf
:PROPERTIES:
:NOTER_DOCUMENT: "/docs/paper.pdf"
:END:
General impressions.
** Abstract
:PROPERTIES:
:NOTER_LOCATION: 1
:END:
Short summary.
** Methods
:PROPERTIES:
:NOTER_LOCATION: 2
:CUSTOM_ID: methods
:END:
** Unanchored thought
** Results
:PROPERTIES:
:NOTER_LOCATION: 4
:END:
*** Detail
:PROPERTIES:
:NOTER_LOCATION: 3
:END:
** Results table
:PROPERTIES:
:NOTER_LOCATION: 4
:END:
* other.pdf
:PROPERTIES:
:NOTER_DOCUMENT: "/docs/other.pdf"
:END:
"""

# A chapter-split book: two sections, notes at character offsets.
BOOK_ID = "/docs/book.epub"

BOOK_SECTIONS = [
    "Chapter one. " + "a" * 487,
    "Chapter two. " + "b" * 987,
]

BOOK_NOTES = """\
* book.epub
:PROPERTIES:
:NOTER_DOCUMENT: "/docs/book.epub"
:END:
** Opening line
:PROPERTIES:
:NOTER_LOCATION: [0, 0]
:END:
** Middle of chapter one
:PROPERTIES:
:NOTER_LOCATION: [0, 250]
:END:
** Start of chapter two
:PROPERTIES:
:NOTER_LOCATION: [1, 5]
:END:
"""

# A help tree: notes in two different nodes.
MANUAL_ID = "emacs-lisp-manual"

MANUAL_NODES = {
    "Top": "The Emacs Lisp manual. " + "t" * 177,
    "Buffers": "A buffer holds text. " + "b" * 379,
}

MANUAL_NOTES = """\
* Emacs Lisp manual
:PROPERTIES:
:NOTER_DOCUMENT: "emacs-lisp-manual"
:END:
** Intro to buffers
:PROPERTIES:
:NOTER_LOCATION: ["Buffers", 0]
:END:
** Top overview
:PROPERTIES:
:NOTER_LOCATION: ["Top", 10]
:END:
** Buffer internals
:PROPERTIES:
:NOTER_LOCATION: ["Buffers", 300]
:END:
"""
