#
# QIS IIIF Image Core
#
# Document:      cache_manager.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       Stores rendered images in a memory or Memcached cache
# Requires:      pylibmc (for Memcached only)
# Copyright:     Quru Ltd (www.quru.com)
# Licence:
#
#   This program is free software: you can redistribute it and/or modify
#   it under the terms of the GNU Affero General Public License as published
#   by the Free Software Foundation, either version 3 of the License, or
#   (at your option) any later version.
#
#   This program is distributed in the hope that it will be useful,
#   but WITHOUT ANY WARRANTY; without even the implied warranty of
#   MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#   GNU Affero General Public License for more details.
#
#   You should have received a copy of the GNU Affero General Public License
#   along with this program.  If not, see http://www.gnu.org/licenses/
#
# Notable modifications:
# Date       By    Details
# =========  ====  ============================================================
#
# pylibmc notes:
#
# * On Debian or Ubuntu, sudo apt-get install libmemcached-dev then pip install pylibmc
# * The pylibmc client is not thread safe, so there is one client per thread
#

import threading
import time

from .errors import StartupError

_pylibmc_import_error = None
try:
    import pylibmc
except Exception as e:
    _pylibmc_import_error = e

MAX_OBJECT_SLOTS = 32
PURGE_INTERVAL_SECS = 60
SLOT_HEADER_SIZE = 4

SERVER_MAX_KEY_LENGTH = 250
SERVER_MAX_VALUE_LENGTH = 1024 * 1024
MAX_SLOT_SIZE = (
    SERVER_MAX_VALUE_LENGTH - (
        SERVER_MAX_KEY_LENGTH + 80 + SLOT_HEADER_SIZE
    )
)


class CacheManager(object):
    """
    Base class for the cache back-ends, providing fetch-or-compute over the
    get/put functions implemented by each back-end.
    """
    def fetch(self, key, expiry_secs, compute_fn):
        """
        Returns the object with the given key from cache. If there is no such
        object, returns the result of compute_fn() after adding it to cache
        with an expiry time in seconds (0 for no expiry).

        Any exception raised by compute_fn() is passed on, and nothing is cached.
        Two callers may compute the same key at the same time, in which case
        the last one to finish replaces the other's cache entry.
        """
        obj = self.get(key)
        if obj is None:
            obj = compute_fn()
            self.put(key, obj, expiry_secs)
        return obj

    def get(self, key):
        raise NotImplementedError()

    def put(self, key, obj, expiry_secs=0):
        raise NotImplementedError()

    def delete(self, key):
        raise NotImplementedError()

    def clear(self):
        raise NotImplementedError()


class NullCacheManager(CacheManager):
    """
    A cache that stores nothing.
    """
    def get(self, key):
        return None

    def put(self, key, obj, expiry_secs=0):
        return True

    def delete(self, key):
        return True

    def clear(self):
        return True


class MemoryCacheManager(CacheManager):
    """
    Implements a simple key/value in-memory cache with expiry times, with an
    internal lock to ensure thread safety. This object is for simple use cases
    within one Python process. Use Memcached for a scalable system-wide cache.

    Expired entries are removed when they are next requested, and all expired
    entries are purged by put() at most once every PURGE_INTERVAL_SECS.
    """
    def __init__(self, time_fn=time.time):
        self._lock = threading.Lock()
        self._cache = dict()
        self._time = time_fn
        self._last_purge = time_fn()

    def get(self, key):
        """
        Returns the cache entry for the given key,
        or None if there is no such key or the entry has expired.
        """
        with self._lock:
            entry = self._cache.get(key, None)
            if entry is None:
                return None
            (expires, obj) = entry
            if expires and expires <= self._time():
                del self._cache[key]
                return None
            return obj

    def put(self, key, obj, expiry_secs=0):
        """
        Sets or replaces a cache entry. Returns True.
        """
        now = self._time()
        expires = (now + expiry_secs) if expiry_secs else 0
        with self._lock:
            if now - self._last_purge >= PURGE_INTERVAL_SECS:
                self._purge(now)
            self._cache[key] = (expires, obj)
        return True

    def _purge(self, now):
        # Requires the lock to be held
        expired = [k for (k, (expires, _)) in self._cache.items() if expires and expires <= now]
        for k in expired:
            del self._cache[k]
        self._last_purge = now

    def delete(self, key):
        with self._lock:
            self._cache.pop(key, None)
        return True

    def clear(self):
        """
        Removes all entries from the cache.
        """
        with self._lock:
            self._cache.clear()
        return True

    def count(self):
        """
        Returns the number of entries in the cache, including expired entries
        that have not yet been removed.
        """
        with self._lock:
            return len(self._cache)


class MemcachedCacheManager(CacheManager):
    """
    Provides object storage in a back-end Memcached key/value store.
    Objects too large for a Memcached slot are transparently stored as
    multiple chunks, the first of which has a header giving the number
    of chunks.
    """
    def __init__(self, logger, server_list):
        global _pylibmc_import_error
        if _pylibmc_import_error:
            raise StartupError('Failed to import pylibmc: ' + str(_pylibmc_import_error))
        self._server_list = server_list
        self._logger = logger
        self._locals = threading.local()

    def client(self):
        """
        Returns a cache client local to the current thread.
        """
        c = getattr(self._locals, 'client', None)
        if c is None:
            self._locals.client = self._open_cache()
            c = self._locals.client
        return c

    def get(self, key):
        """
        Retrieves an object from cache, transparently handling chunked
        object storage as necessary. None is returned if the requested object
        no longer exists in cache.
        """
        chunk = self.raw_get(key + '_1')
        if chunk is not None:
            num_slots = self._get_slot_header_value(chunk[0:SLOT_HEADER_SIZE])
            if num_slots <= 0:
                # Looks like an unmanaged object (no header).
                return chunk
            elif num_slots == 1:
                return chunk[SLOT_HEADER_SIZE:]
            else:
                # Read the other chunks. Some or all may have been expired/purged.
                chunk_keys = [key + '_' + str(num) for num in range(2, num_slots + 1)]
                chunks = self.raw_getn(chunk_keys)
                if len(chunks) == len(chunk_keys):
                    return chunk[SLOT_HEADER_SIZE:] + b''.join(chunks[k] for k in chunk_keys)
                # Delete any orphaned chunks that may still exist
                self.delete(key)
        return None

    def put(self, key, obj, expiry_secs=0):
        """
        Adds or replaces an object in cache, with an optional expiry time
        in seconds. Returns a boolean indicating success.
        """
        chunks = {}
        num_slots = self._slots_for_size(len(obj))
        if num_slots > MAX_OBJECT_SLOTS:
            self._logger.warning('Object too large to cache for key ' + key)
            return False
        for slot in range(1, num_slots + 1):
            from_offset = (slot - 1) * MAX_SLOT_SIZE
            to_offset = len(obj) if slot == num_slots else (slot * MAX_SLOT_SIZE)
            slot_header = self._get_slot_header(num_slots) if slot == 1 else b''
            chunks[key + '_' + str(slot)] = slot_header + obj[from_offset:to_offset]
        if self.raw_putn(chunks, expiry_secs):
            return True
        # There might now be a mix of chunk versions in the cache
        self.delete(key)
        return False

    def delete(self, key):
        """
        Removes an object and all its possible chunks from cache.
        """
        chunk_keys = [key + '_' + str(num) for num in range(1, MAX_OBJECT_SLOTS + 1)]
        return self.raw_deleten(chunk_keys)

    def clear(self):
        """
        Deletes all items from the cache.
        """
        try:
            self.client().flush_all()
            return True
        except pylibmc.Error as e:
            self._logger.error('Failed to clear cache: ' + str(e))
            return False

    def raw_get(self, key):
        try:
            return self.client().get(self._prepare_cache_key(key))
        except pylibmc.Error as e:
            self._logger.warning('Cache get failed: ' + str(e))
            return None

    def raw_getn(self, keys):
        try:
            return self.client().get_multi(self._prepare_cache_keys(keys))
        except pylibmc.Error as e:
            self._logger.warning('Cache get failed: ' + str(e))
            return {}

    def raw_putn(self, mapping, expiry_secs=0):
        mapping = dict((self._prepare_cache_key(k), v) for (k, v) in mapping.items())
        try:
            failed_keys = self.client().set_multi(mapping, expiry_secs)
            return (len(failed_keys) == 0)
        except pylibmc.Error as e:
            self._logger.warning('Cache put failed: ' + str(e))
            return False

    def raw_deleten(self, keys):
        try:
            self.client().delete_multi(self._prepare_cache_keys(keys))
            return True
        except pylibmc.Error:
            return False

    def _prepare_cache_key(self, key):
        """
        Ensures a key is valid for memcached by replacing spaces. Returns the
        modified key, or raises a ValueError if the key is empty or too long.
        """
        ascii_key = key.replace(' ', '_')
        if not ascii_key:
            raise ValueError('Cache key is empty')
        if len(ascii_key) > SERVER_MAX_KEY_LENGTH:
            raise ValueError('Cache key is too long: ' + ascii_key)
        return ascii_key

    def _prepare_cache_keys(self, keys):
        return [self._prepare_cache_key(k) for k in keys]

    def _get_slot_header_value(self, header):
        """
        Returns the number of slots specified by a slot header, or 0 if
        the supplied bytes are not a valid slot header.
        """
        if len(header) == SLOT_HEADER_SIZE and header[0:1] == b'$' and header[-1:] == b'$':
            try:
                return int(header[1:-1])
            except ValueError:
                return 0
        return 0

    def _get_slot_header(self, num_slots):
        return b'$%02d$' % num_slots

    def _slots_for_size(self, num_bytes):
        """
        Returns the number of cache slots required to store the given number of bytes.
        """
        slots = num_bytes // MAX_SLOT_SIZE
        if num_bytes % MAX_SLOT_SIZE > 0:
            slots += 1
        return max(1, slots)

    def _open_cache(self):
        """
        Returns a new client connection to the cache.
        Under pylibmc, this object is NOT thread safe.
        """
        return pylibmc.Client(
            self._server_list,
            behaviors={
                "distribution": "consistent",
                "connect_timeout": 3000,
                "send_timeout": 3000000,
                "receive_timeout": 3000000,
                "dead_timeout": 5,
                "verify_keys": False
            },
            binary=False
        )


def create_cache_manager(settings, logger):
    """
    Returns the cache manager named by the CACHE_BACKEND setting:
    "memory", "memcached" or "none".
    """
    back_end = settings['CACHE_BACKEND'].lower()
    if back_end == 'memory':
        return MemoryCacheManager()
    elif back_end == 'memcached':
        return MemcachedCacheManager(logger, settings['MEMCACHED_SERVERS'])
    elif back_end == 'none':
        return NullCacheManager()
    raise StartupError('Unsupported cache back end: ' + settings['CACHE_BACKEND'])
