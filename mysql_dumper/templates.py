"""
Boilerplate written around the data of a dump.

Templates are filled with str.format().
"""

HEADER_TEMPLATE = """-- Server version\t{server_version}

/*!40101 SET @OLD_CHARACTER_SET_CLIENT=@@CHARACTER_SET_CLIENT */;
/*!40101 SET @OLD_CHARACTER_SET_RESULTS=@@CHARACTER_SET_RESULTS */;
/*!40101 SET @OLD_COLLATION_CONNECTION=@@COLLATION_CONNECTION */;
SET NAMES {charset_name};
/*!40103 SET @OLD_TIME_ZONE=@@TIME_ZONE */;
/*!40103 SET TIME_ZONE='+00:00' */;
/*!40014 SET @OLD_UNIQUE_CHECKS=@@UNIQUE_CHECKS, UNIQUE_CHECKS=0 */;
/*!40014 SET @OLD_FOREIGN_KEY_CHECKS=@@FOREIGN_KEY_CHECKS, FOREIGN_KEY_CHECKS=0 */;
/*!40101 SET @OLD_SQL_MODE=@@SQL_MODE, SQL_MODE='NO_AUTO_VALUE_ON_ZERO' */;
/*!40111 SET @OLD_SQL_NOTES=@@SQL_NOTES, SQL_NOTES=0 */;
"""

# Written before the row statements of a table.
TABLE_HEADER_TEMPLATE = """
--
-- Table structure for table {name_esc}
--

DROP TABLE IF EXISTS {name_esc};
/*!40101 SET @saved_cs_client     = @@character_set_client */;
SET character_set_client = {charset_name};
{create_sql};
/*!40101 SET character_set_client = @saved_cs_client */;

--
-- Dumping data for table {name_esc}
--

LOCK TABLES {name_esc} WRITE;
/*!40000 ALTER TABLE {name_esc} DISABLE KEYS */;
"""

TABLE_FOOTER_TEMPLATE = """/*!40000 ALTER TABLE {name_esc} ENABLE KEYS */;
UNLOCK TABLES;
"""

FOOTER_TEMPLATE = """/*!40103 SET TIME_ZONE=@OLD_TIME_ZONE */;

/*!40101 SET SQL_MODE=@OLD_SQL_MODE */;
/*!40014 SET FOREIGN_KEY_CHECKS=@OLD_FOREIGN_KEY_CHECKS */;
/*!40014 SET UNIQUE_CHECKS=@OLD_UNIQUE_CHECKS */;
/*!40101 SET CHARACTER_SET_CLIENT=@OLD_CHARACTER_SET_CLIENT */;
/*!40101 SET CHARACTER_SET_RESULTS=@OLD_CHARACTER_SET_RESULTS */;
/*!40101 SET COLLATION_CONNECTION=@OLD_COLLATION_CONNECTION */;
/*!40111 SET SQL_NOTES=@OLD_SQL_NOTES */;

-- Dump completed on {complete_time}
"""
