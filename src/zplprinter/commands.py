"""
Device Query Strings for ZPL Printers.

Host queries are fixed, device-defined strings terminated with CRLF. They are
sent verbatim and are not built from the Command Model.

Command Sources:
- ~HQ host queries: ZPL II Programming Guide, "~HQ Host Query"
- ~HM memory status: ZPL II Programming Guide, "~HM Host RAM Status"
"""

from enum import Enum


class QueryType(str, Enum):
    """Host query codes supported by the decoders."""

    STATUS = "ES"            # Error and warning bitmasks
    SERIAL_NUMBER = "SN"
    HARDWARE_ADDRESS = "HA"  # MAC address
    ODOMETER = "OD"
    PRINTHEAD_LIFE = "PH"
    PLUG_AND_PLAY = "PP"
    MEMORY = "HM"            # Sent as ~HM, not ~HQHM

    def __str__(self) -> str:
        return self.value


class ZPLQueries:
    """
    Query command builders for ZPL printers.

    All queries are ASCII strings terminated with CRLF (\\r\\n).
    """

    CRLF = "\r\n"

    @staticmethod
    def host_query(code: str) -> str:
        """
        Generic ~HQ host query.

        Args:
            code: Two-letter query code, e.g. "SN"
        """
        return f"~HQ{code}" + ZPLQueries.CRLF

    @staticmethod
    def host_status() -> str:
        """
        Query error and warning flags.

        Response: see status.PrinterStatus.parse
        """
        return ZPLQueries.host_query(QueryType.STATUS.value)

    @staticmethod
    def memory_status() -> str:
        """
        Query RAM status.

        Response: "total,max_available,current_available" in KB
        (see responses.MemoryStatus.parse)
        """
        return "~HM" + ZPLQueries.CRLF

    @staticmethod
    def for_type(query_type: QueryType) -> str:
        """Query string for a QueryType."""
        if query_type is QueryType.MEMORY:
            return ZPLQueries.memory_status()
        return ZPLQueries.host_query(query_type.value)
