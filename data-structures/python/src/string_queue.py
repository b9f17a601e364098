"""Singly-linked queue of text values.

Supports insertion at both ends, removal from the head into a caller-owned
fixed-size buffer, O(1) size, in-place reversal and a stable merge sort that
only relinks elements.

Values are ordered byte-wise over their UTF-8 encoding, which for Python
strings is the same as comparing code points. Lone surrogates are carried
through buffers with the "surrogatepass" error handler, so any str can be
stored and removed.

Destroying a queue empties it. Using a queue after destroy() is a caller
error and is not checked.
"""

import logging

logger = logging.getLogger(__name__)

TERMINATOR = 0
ENCODING = "utf-8"
ERRORS = "surrogatepass"


class AllocationFailure(MemoryError):
    """An element or its value copy could not be allocated."""


def compare(a, b):
    """Three-way comparison: negative, zero or positive."""
    return (a > b) - (a < b)


class OutputBuffer:
    """Fixed-capacity NUL-terminated byte buffer for remove_head."""

    def __init__(self, capacity):
        if not isinstance(capacity, int):
            raise TypeError("capacity must be an integer")
        if capacity < 0:
            raise ValueError("capacity must be non-negative")
        self.raw = bytearray(capacity)

    @property
    def capacity(self):
        return len(self.raw)

    def text(self):
        return read_buffer(self.raw)

    def __len__(self):
        return len(self.raw)


def read_buffer(buffer):
    """Decode a buffer filled by remove_head, up to its first terminator."""
    if isinstance(buffer, OutputBuffer):
        buffer = buffer.raw
    data = bytes(buffer)
    end = data.find(TERMINATOR)
    if end != -1:
        data = data[:end]
    return data.decode(ENCODING, ERRORS)


def _bounded_copy(value, buffer, bufsize):
    if isinstance(buffer, OutputBuffer):
        buffer = buffer.raw
    limit = len(buffer) if bufsize is None else min(bufsize, len(buffer))
    if limit <= 0:
        return
    encoded = value.encode(ENCODING, ERRORS)
    n = min(len(encoded), limit - 1)
    # back off so a multi-byte character is never split (continuation bytes are 0b10xxxxxx)
    while 0 < n < len(encoded) and (encoded[n] & 0xC0) == 0x80:
        n -= 1
    buffer[:n] = encoded[:n]
    buffer[n] = TERMINATOR


class Queue:
    class Element:
        __slots__ = ("value", "next", "__weakref__")

        def __init__(self):
            self.value = None
            self.next = None

    def __init__(self):
        self._head = None
        self._tail = None
        self._count = 0

    def _new_element(self):
        return self.Element()

    def _copy_value(self, value):
        return str(value)

    def _allocate(self, value):
        """Build a detached element holding a private copy of value.

        Raises AllocationFailure if either allocation fails. If the copy
        fails the element has already been released.
        """
        try:
            element = self._new_element()
        except MemoryError as exc:
            raise AllocationFailure("could not allocate element") from exc
        try:
            element.value = self._copy_value(value)
        except MemoryError as exc:
            del element
            raise AllocationFailure("could not copy value") from exc
        return element

    @staticmethod
    def _check_value(value):
        if not isinstance(value, str):
            raise TypeError(f"value must be a str, got {type(value).__name__}")

    def insert_head(self, value):
        self._check_value(value)
        try:
            element = self._allocate(value)
        except AllocationFailure as exc:
            logger.warning("insert_head failed: %s", exc)
            return False
        element.next = self._head
        self._head = element
        if self._tail is None:
            self._tail = element
        self._count += 1
        return True

    def insert_tail(self, value):
        self._check_value(value)
        try:
            element = self._allocate(value)
        except AllocationFailure as exc:
            logger.warning("insert_tail failed: %s", exc)
            return False
        if self._tail is None:
            self._head = element
        else:
            self._tail.next = element
        self._tail = element
        self._count += 1
        return True

    def remove_head(self, buffer=None, bufsize=None):
        """Remove the head element, copying its value into buffer if given.

        At most bufsize - 1 bytes of the UTF-8 value are copied, followed by
        a NUL terminator. bufsize defaults to, and is clamped to, the length
        of the buffer. Returns False if the queue is empty.
        """
        if self._head is None:
            return False
        element = self._head
        if buffer is not None:
            _bounded_copy(element.value, buffer, bufsize)
        self._head = element.next
        element.next = None
        element.value = None
        self._count -= 1
        if self._count == 0:
            self._tail = None
        return True

    def size(self):
        return self._count

    def is_empty(self):
        return self._count == 0

    def reverse(self):
        """Reverse the chain in place by relinking; allocates nothing."""
        if self._head is None:
            return
        logger.debug("reversing %d elements", self._count)
        prev = None
        current = self._head
        self._tail = current
        while current is not None:
            following = current.next
            current.next = prev
            prev = current
            current = following
        self._head = prev

    def sort(self):
        """Stable ascending merge sort over the chain."""
        if self._head is None or self._head.next is None:
            return
        logger.debug("sorting %d elements", self._count)
        self._head = _merge_sort(self._head)
        tail = self._head
        while tail.next is not None:
            tail = tail.next
        self._tail = tail

    def destroy(self):
        """Release every element. The queue must not be used afterwards."""
        logger.debug("destroying queue with %d elements", self._count)
        current = self._head
        self._head = None
        self._tail = None
        while current is not None:
            following = current.next
            current.next = None
            current.value = None
            current = following
        self._count = 0

    def __len__(self):
        return self._count

    def __bool__(self):
        return self._count > 0


def _split(head):
    """Cut a chain of two or more elements at its midpoint.

    The fast cursor starts one ahead so that the left half is never longer
    than the right by more than one and is never empty.
    """
    slow = head
    fast = head.next
    while fast is not None and fast.next is not None:
        slow = slow.next
        fast = fast.next.next
    right = slow.next
    slow.next = None
    return head, right


def _merge(left, right):
    """Merge two non-empty sorted chains, taking from left on ties."""
    if compare(left.value, right.value) <= 0:
        head, left = left, left.next
    else:
        head, right = right, right.next
    last = head
    while left is not None and right is not None:
        if compare(left.value, right.value) <= 0:
            last.next = left
            left = left.next
        else:
            last.next = right
            right = right.next
        last = last.next
    last.next = left if left is not None else right
    return head


def _merge_sort(head):
    if head is None or head.next is None:
        return head
    left, right = _split(head)
    return _merge(_merge_sort(left), _merge_sort(right))


# Functional interface. Every operation accepts None for an absent queue.

def new():
    """Return a new empty queue, or None if it could not be allocated."""
    try:
        return Queue()
    except MemoryError:
        logger.warning("could not allocate queue")
        return None


def destroy(q):
    if q is None:
        return
    q.destroy()


def insert_head(q, value):
    if q is None:
        return False
    return q.insert_head(value)


def insert_tail(q, value):
    if q is None:
        return False
    return q.insert_tail(value)


def remove_head(q, buffer=None, bufsize=None):
    if q is None:
        return False
    return q.remove_head(buffer, bufsize)


def size(q):
    if q is None:
        return 0
    return q.size()


def reverse(q):
    if q is None:
        return
    q.reverse()


def sort(q):
    if q is None:
        return
    q.sort()
